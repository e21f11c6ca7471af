from .step_05_service_user import EnsureServiceUserStep
from .step_10_sudoers import GrantSudoersStep
from .step_15_system_upgrade import UpgradeSystemStep
from .step_20_prerequisites import InstallPrerequisitesStep
from .step_25_wkhtmltopdf import InstallWkhtmltopdfStep
from .step_30_remove_mariadb import RemoveMismatchedMariaDBStep
from .step_35_install_mariadb import InstallMariaDBStep
from .step_40_configure_mariadb import ConfigureMariaDBStep
from .step_45_secure_mariadb import SecureMariaDBStep
from .step_50_python import EnsurePythonStep
from .step_55_node import InstallNodeToolchainStep
from .step_60_bench_cli import InstallBenchCliStep
from .step_65_bench_init import InitBenchStep
from .step_70_create_site import CreateSiteStep
from .step_75_erpnext import InstallErpnextStep
from .step_80_production import SetupProductionStep
from .step_85_ssl import InstallTlsCertificateStep
from .step_90_permissions import ApplyWorkspacePermissionsStep
from .step_95_summary import PrintSummaryStep

__all__ = [
    "EnsureServiceUserStep",
    "GrantSudoersStep",
    "UpgradeSystemStep",
    "InstallPrerequisitesStep",
    "InstallWkhtmltopdfStep",
    "RemoveMismatchedMariaDBStep",
    "InstallMariaDBStep",
    "ConfigureMariaDBStep",
    "SecureMariaDBStep",
    "EnsurePythonStep",
    "InstallNodeToolchainStep",
    "InstallBenchCliStep",
    "InitBenchStep",
    "CreateSiteStep",
    "InstallErpnextStep",
    "SetupProductionStep",
    "InstallTlsCertificateStep",
    "ApplyWorkspacePermissionsStep",
    "PrintSummaryStep",
]
