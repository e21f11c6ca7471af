"""
Tests for the bench workspace, site, ERPNext, production, TLS, permissions
and summary steps.
"""

import logging

from frappe_provisioner.pipeline import run_pipeline
from frappe_provisioner.state import StepOutcome
from frappe_provisioner.steps import (
    ApplyWorkspacePermissionsStep,
    CreateSiteStep,
    InitBenchStep,
    InstallErpnextStep,
    InstallTlsCertificateStep,
    PrintSummaryStep,
    SetupProductionStep,
)
from frappe_provisioner.steps.step_95_summary import access_url


class TestInitBench:
    def test_initializes_in_home(self, ctx, runner, home, state):
        runner.fail("test", "-e", f"{home}/frappe-bench/apps/frappe")
        run_pipeline(ctx=ctx, state=state, steps=[InitBenchStep()])
        call = runner.calls_to("bench", "init")[0]
        assert call.bare == ["bench", "init", "frappe-bench", "--frappe-branch", "version-15", "--verbose"]
        assert call.cwd == str(home)
        assert not call.sudo

    def test_existing_workspace_is_skipped(self, ctx, runner, state):
        result = run_pipeline(ctx=ctx, state=state, steps=[InitBenchStep()])
        assert result.skipped_steps == ["65_bench_init"]


class TestCreateSite:
    def test_prompts_and_creates_site(self, ctx, runner, answers, home, state, caplog):
        runner.fail("test", "-e", f"{home}/frappe-bench/sites/erp.example.com")
        answers.extend(["erp.example.com", "adm1n", "adm1n"])
        with caplog.at_level(logging.INFO):
            result = run_pipeline(ctx=ctx, state=state, steps=[CreateSiteStep()])

        assert result.ok
        call = runner.calls_to("bench", "new-site")[0]
        assert call.bare == [
            "bench",
            "new-site",
            "erp.example.com",
            "--db-root-password",
            "s3cr'et",
            "--admin-password",
            "adm1n",
        ]
        assert call.cwd == str(home / "frappe-bench")
        assert state.admin_password == "adm1n"
        assert [pw for _, pw in answers.asked] == [False, True, True]
        assert "adm1n" not in caplog.text

    def test_admin_password_confirmation_loops(self, ctx, runner, answers, state):
        runner.fail("test", "-e")
        answers.extend(["site.local", "a", "b", "c", "c"])
        run_pipeline(ctx=ctx, state=state, steps=[CreateSiteStep()])
        assert state.admin_password == "c"

    def test_existing_site_skips_without_asking_for_password(self, ctx, runner, answers, state):
        answers.extend(["erp.example.com"])
        result = run_pipeline(ctx=ctx, state=state, steps=[CreateSiteStep()])
        assert result.skipped_steps == ["70_create_site"]
        assert state.admin_password is None
        assert not runner.ran("bench")


class TestInstallErpnext:
    def test_declined_is_skipped(self, ctx, runner, answers, state):
        state.site_name = "erp.example.com"
        answers.extend(["maybe", "n"])
        result = run_pipeline(ctx=ctx, state=state, steps=[InstallErpnextStep()])
        assert result.outcomes == [StepOutcome.skipped("75_erpnext", "ERPNext installation declined")]
        assert state.install_erpnext is False
        assert not runner.ran("bench")

    def test_fetches_and_installs(self, ctx, runner, answers, home, state):
        state.site_name = "erp.example.com"
        answers.extend(["YES"])
        runner.on("bench", "--site", "erp.example.com", "list-apps", stdout="frappe\n")
        runner.fail("test", "-e", f"{home}/frappe-bench/apps/erpnext")
        result = run_pipeline(ctx=ctx, state=state, steps=[InstallErpnextStep()])

        assert result.ok
        assert runner.calls_to("bench", "get-app")[0].bare == ["bench", "get-app", "erpnext", "--branch", "version-15"]
        assert runner.ran("bench", "--site", "erp.example.com", "install-app", "erpnext")
        assert runner.index_of("bench", "get-app") < runner.index_of("bench", "--site", "erp.example.com", "install-app")

    def test_already_installed_is_skipped(self, ctx, runner, state):
        state.site_name = "erp.example.com"
        state.install_erpnext = True
        runner.on("bench", "--site", "erp.example.com", "list-apps", stdout="frappe 15.0.0 version-15\nerpnext 15.0.0 version-15\n")
        result = run_pipeline(ctx=ctx, state=state, steps=[InstallErpnextStep()])
        assert result.skipped_steps == ["75_erpnext"]


class TestSetupProduction:
    def test_runs_for_current_user(self, ctx, runner, home, state):
        runner.fail("test", "-e", "/etc/nginx/conf.d/frappe-bench.conf")
        run_pipeline(ctx=ctx, state=state, steps=[SetupProductionStep()])
        call = runner.calls_to("bench", "setup", "production")[0]
        assert call.bare == ["bench", "setup", "production", "erp"]
        assert call.cwd == str(home / "frappe-bench")

    def test_configured_host_is_skipped(self, ctx, runner, state):
        result = run_pipeline(ctx=ctx, state=state, steps=[SetupProductionStep()])
        assert result.skipped_steps == ["80_production"]


class TestInstallTlsCertificate:
    def test_declined_is_skipped(self, ctx, runner, answers, state):
        state.site_name = "erp.example.com"
        answers.extend(["no"])
        result = run_pipeline(ctx=ctx, state=state, steps=[InstallTlsCertificateStep()])
        assert result.skipped_steps == ["85_ssl"]
        assert not runner.ran("snap")

    def test_installs_certbot_then_requests_certificate(self, ctx, runner, answers, state):
        state.site_name = "erp.example.com"
        runner.fail("test", "-e")
        answers.extend(["y", "ops@example.com", ""])
        result = run_pipeline(ctx=ctx, state=state, steps=[InstallTlsCertificateStep()])

        assert result.ok
        assert runner.ran("snap", "install", "--classic", "certbot")
        assert runner.ran("ln", "-s", "/snap/bin/certbot", "/usr/bin/certbot")
        certbot = runner.calls_to("certbot")[0]
        assert certbot.sudo
        assert certbot.bare == [
            "certbot",
            "--nginx",
            "--non-interactive",
            "--agree-tos",
            "--email",
            "ops@example.com",
            "-d",
            "erp.example.com",
        ]
        assert answers.asked[-1][0] == "Press Enter to continue"

    def test_existing_symlink_is_not_recreated(self, ctx, runner, answers, state):
        state.site_name = "erp.example.com"
        runner.fail("test", "-e", "/etc/letsencrypt/live/erp.example.com/fullchain.pem")
        answers.extend(["yes", "ops@example.com", ""])
        run_pipeline(ctx=ctx, state=state, steps=[InstallTlsCertificateStep()])
        assert not runner.ran("ln")

    def test_existing_certificate_is_skipped(self, ctx, runner, answers, state):
        state.site_name = "erp.example.com"
        answers.extend(["yes"])
        result = run_pipeline(ctx=ctx, state=state, steps=[InstallTlsCertificateStep()])
        assert result.skipped_steps == ["85_ssl"]
        assert not runner.ran("certbot")


class TestPermissionsAndSummary:
    def test_relaxes_workspace_permissions(self, ctx, runner, home, state):
        run_pipeline(ctx=ctx, state=state, steps=[ApplyWorkspacePermissionsStep()])
        call = runner.calls_to("chmod")[0]
        assert call.sudo
        assert call.bare == ["chmod", "-R", "755", str(home / "frappe-bench")]

    def test_summary_without_ssl_uses_server_ip(self, ctx, runner, console, state):
        state.site_name = "erp.example.com"
        state.install_ssl = False
        runner.on("hostname", "-I", stdout="10.0.0.5 172.17.0.1\n")
        run_pipeline(ctx=ctx, state=state, steps=[PrintSummaryStep()])
        out = console.file.getvalue()
        assert "http://10.0.0.5" in out
        assert "https://" not in out.replace("https://docs.erpnext.com", "")

    def test_summary_with_ssl_uses_site_name(self, ctx, runner, console, state):
        state.site_name = "erp.example.com"
        state.install_ssl = True
        state.outcomes.append(StepOutcome.succeeded("85_ssl"))
        run_pipeline(ctx=ctx, state=state, steps=[PrintSummaryStep()])
        assert "https://erp.example.com" in console.file.getvalue()
        assert not runner.ran("hostname")

    def test_access_url_after_skipped_existing_certificate(self, state):
        state.site_name = "erp.example.com"
        state.install_ssl = True
        state.outcomes.append(StepOutcome.skipped("85_ssl", "already installed"))
        assert access_url(state) == "https://erp.example.com"
