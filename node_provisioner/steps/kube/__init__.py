from .step_10_install_prerequisites import InstallPrerequisitesStep
from .step_20_disable_swap import DisableSwapStep
from .step_30_kernel_modules import KernelModulesStep
from .step_35_sysctl import SysctlStep
from .step_40_install_containerd import InstallContainerdStep
from .step_50_kubernetes_repo import KubernetesRepoStep
from .step_55_install_kubernetes import InstallKubernetesStep
from .step_60_kubeadm_init import KubeadmInitStep
from .step_70_configure_kubectl import ConfigureKubectlStep
from .step_80_install_cni import InstallCniStep
from .step_85_untaint_control_plane import UntaintControlPlaneStep
from .step_90_kubectl_alias import KubectlAliasStep
from .step_95_cluster_info import ClusterInfoStep

__all__ = [
    "InstallPrerequisitesStep",
    "DisableSwapStep",
    "KernelModulesStep",
    "SysctlStep",
    "InstallContainerdStep",
    "KubernetesRepoStep",
    "InstallKubernetesStep",
    "KubeadmInitStep",
    "ConfigureKubectlStep",
    "InstallCniStep",
    "UntaintControlPlaneStep",
    "KubectlAliasStep",
    "ClusterInfoStep",
]
