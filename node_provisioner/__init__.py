"""Node provisioning sequencers.

Two standalone, ordered step lists:
- kube: single-node Kubernetes control plane bootstrap (kubeadm + containerd + Flannel)
- shell: zsh / Oh My Zsh environment installer

Core design goals:
- Fail-fast, with an explicit best-effort policy per step
- Idempotent steps where the host allows it
- Configuration resolved once, passed explicitly
- Centralized logging
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
