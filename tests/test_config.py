import pytest

from frappe_provisioner.config import DEFAULT_PREREQUISITES, ProvisionConfig, load_config


def test_defaults_pin_the_v15_stack():
    cfg = load_config(None)
    assert cfg.supported_distributor == "Ubuntu"
    assert cfg.supported_versions == ["22.04", "24.04"]
    assert cfg.service_user == "frappe"
    assert cfg.mariadb_version == "10.6"
    assert cfg.mariadb_repo_url == "https://mariadb.org/mariadb/repositories/10.6/ubuntu"
    assert cfg.password_max_attempts == 30
    assert cfg.password_retry_delay == 2.0
    assert cfg.python_min_version == "3.10"
    assert cfg.node_major == 18
    assert cfg.wkhtmltopdf_release == "0.12.6.1-2"
    assert cfg.frappe_branch == "version-15"
    assert cfg.erpnext_branch == "version-15"
    assert cfg.bench_dir == "frappe-bench"
    assert cfg.workspace_mode == "755"
    assert cfg.prerequisites == DEFAULT_PREREQUISITES


def test_prerequisites_are_a_copy():
    cfg = ProvisionConfig()
    cfg.prerequisites.append("extra")
    assert "extra" not in DEFAULT_PREREQUISITES


def test_yaml_overrides(tmp_path):
    p = tmp_path / "provisioner.yml"
    p.write_text(
        "\n".join(
            [
                "host:",
                "  supported_versions: [\"22.04\"]",
                "mariadb:",
                "  version: '10.11'",
                "  repo_base: https://mirror.example.com/mariadb/",
                "  password_retry_delay: 0",
                "frappe:",
                "  erpnext_branch: version-15-hotfix",
                "run:",
                "  pacing_seconds: 0",
            ]
        ),
        encoding="utf-8",
    )
    cfg = load_config(str(p))
    assert cfg.supported_versions == ["22.04"]
    assert cfg.mariadb_repo_url == "https://mirror.example.com/mariadb/10.11/ubuntu"
    assert cfg.password_retry_delay == 0.0
    assert cfg.erpnext_branch == "version-15-hotfix"
    assert cfg.frappe_branch == "version-15"
    assert cfg.pacing_seconds == 0.0


def test_empty_file_gives_defaults(tmp_path):
    p = tmp_path / "empty.yaml"
    p.write_text("", encoding="utf-8")
    assert load_config(str(p)).mariadb_version == "10.6"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))


def test_rejects_non_yaml(tmp_path):
    p = tmp_path / "cfg.toml"
    p.write_text("x = 1\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(p))


def test_rejects_non_mapping(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(p))


@pytest.mark.parametrize(
    "body",
    [
        "mariadb:\n  version: 10.10\n",
        "host:\n  supported_versions: [22.04, 24.04]\n",
        "python:\n  min_version: 3.10\n",
        "frappe:\n  workspace_mode: 0755\n",
    ],
)
def test_unquoted_versions_are_rejected(tmp_path, body):
    p = tmp_path / "cfg.yaml"
    p.write_text(body, encoding="utf-8")
    with pytest.raises(ValueError, match="quoted"):
        load_config(str(p))


def test_explicit_zero_is_not_replaced_by_default():
    cfg = ProvisionConfig(raw={"mariadb": {"password_max_attempts": 1}, "node": {"major": 0}})
    assert cfg.password_max_attempts == 1
    assert cfg.node_major == 0


def test_zero_attempts_is_rejected(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text("mariadb:\n  password_max_attempts: 0\n", encoding="utf-8")
    with pytest.raises(ValueError, match="at least 1"):
        load_config(str(p))
