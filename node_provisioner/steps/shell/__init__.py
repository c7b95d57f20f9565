from .step_10_install_zsh import InstallZshStep
from .step_20_install_oh_my_zsh import InstallOhMyZshStep
from .step_30_install_plugins import InstallPluginsStep
from .step_40_configure_plugins import ConfigurePluginsStep
from .step_50_change_shell import ChangeShellStep

__all__ = [
    "InstallZshStep",
    "InstallOhMyZshStep",
    "InstallPluginsStep",
    "ConfigurePluginsStep",
    "ChangeShellStep",
]
