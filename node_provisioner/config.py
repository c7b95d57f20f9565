from __future__ import annotations

import ipaddress
import logging
import os
import re
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from .lib.users import invoking_user

logger = logging.getLogger(__name__)

_K8S_VERSION_RE = re.compile(r"^\d+\.\d+$")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Plugin:
    name: str
    url: str
    depth: Optional[int] = None


@dataclass(frozen=True)
class BootstrapConfig:
    k8s_version: str = "1.34"
    pod_cidr: str = "10.244.0.0/16"
    user: str = "root"
    root: str = "/"
    prerequisites: Tuple[str, ...] = (
        "apt-transport-https",
        "ca-certificates",
        "curl",
        "gpg",
        "lsb-release",
        "gnupg",
        "software-properties-common",
        "socat",
        "conntrack",
        "ipset",
        "ebtables",
        "ethtool",
    )
    kernel_modules: Tuple[str, ...] = ("overlay", "br_netfilter")
    sysctl: Dict[str, str] = field(
        default_factory=lambda: {
            "net.bridge.bridge-nf-call-iptables": "1",
            "net.bridge.bridge-nf-call-ip6tables": "1",
            "net.ipv4.ip_forward": "1",
        }
    )
    sandbox_image: str = "registry.k8s.io/pause:3.9"
    cri_socket: str = "unix:///run/containerd/containerd.sock"
    kube_packages: Tuple[str, ...] = ("kubelet", "kubeadm", "kubectl")
    cni_manifest: str = "https://raw.githubusercontent.com/flannel-io/flannel/v0.25.5/Documentation/kube-flannel.yml"
    alias_line: str = "alias k=kubectl"

    def host_path(self, rel: str) -> Path:
        return Path(self.root) / rel.lstrip("/")

    @property
    def fstab(self) -> Path:
        return self.host_path("/etc/fstab")

    @property
    def modules_load_conf(self) -> Path:
        return self.host_path("/etc/modules-load.d/k8s.conf")

    @property
    def sysctl_conf(self) -> Path:
        return self.host_path("/etc/sysctl.d/k8s.conf")

    @property
    def containerd_config(self) -> Path:
        return self.host_path("/etc/containerd/config.toml")

    @property
    def apt_keyring(self) -> Path:
        return self.host_path("/etc/apt/keyrings/kubernetes-apt-keyring.gpg")

    @property
    def apt_sources_list(self) -> Path:
        return self.host_path("/etc/apt/sources.list.d/kubernetes.list")

    @property
    def admin_conf(self) -> Path:
        return self.host_path("/etc/kubernetes/admin.conf")


DEFAULT_PLUGINS: Tuple[Plugin, ...] = (
    Plugin("zsh-autosuggestions", "https://github.com/zsh-users/zsh-autosuggestions.git"),
    Plugin("zsh-syntax-highlighting", "https://github.com/zsh-users/zsh-syntax-highlighting.git"),
    Plugin("fast-syntax-highlighting", "https://github.com/zdharma-continuum/fast-syntax-highlighting.git"),
    Plugin("zsh-autocomplete", "https://github.com/marlonrichert/zsh-autocomplete.git", depth=1),
)


@dataclass(frozen=True)
class ShellConfig:
    user: str = "root"
    zsh_custom: Optional[str] = None
    packages: Tuple[str, ...] = ("zsh-autosuggestions", "zsh-syntax-highlighting", "zsh")
    ohmyzsh_install_url: str = "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"
    plugins: Tuple[Plugin, ...] = DEFAULT_PLUGINS
    base_plugins: Tuple[str, ...] = ("git",)

    def custom_dir(self, home: Path) -> Path:
        if self.zsh_custom:
            return Path(self.zsh_custom).expanduser()
        return home / ".oh-my-zsh" / "custom"

    @property
    def enabled_plugins(self) -> Tuple[str, ...]:
        return (*self.base_plugins, *(p.name for p in self.plugins))


def load_config_file(path: str) -> Dict[str, Any]:
    """Read a YAML mapping of config overrides."""

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError("config file must be YAML")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping/object")
    return raw


def _coerce(cls: type, raw: Mapping[str, Any], section: str) -> Dict[str, Any]:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown {section} config keys: {', '.join(unknown)}")

    str_keys = {f.name for f in fields(cls) if f.type in ("str", "Optional[str]")}

    out: Dict[str, Any] = {}
    for key, value in raw.items():
        if key in str_keys and value is not None and not isinstance(value, str):
            # YAML reads 1.30 as the float 1.3
            raise ConfigError(
                f"{section}.{key} must be a string, got {value!r}; quote it in YAML (e.g. {key}: '{value}')"
            )
        if key == "plugins":
            try:
                out[key] = tuple(Plugin(**p) for p in value)
            except TypeError as e:
                raise ConfigError(f"Invalid plugin entry in {section}.plugins: {e}") from e
        elif key == "sysctl":
            out[key] = {str(k): str(v) for k, v in dict(value).items()}
        elif isinstance(value, list):
            out[key] = tuple(str(v) for v in value)
        else:
            out[key] = value
    return out


def validate_bootstrap(cfg: BootstrapConfig) -> BootstrapConfig:
    if not isinstance(cfg.k8s_version, str) or not _K8S_VERSION_RE.match(cfg.k8s_version):
        raise ConfigError(f"Invalid Kubernetes version {cfg.k8s_version!r} (expected MAJOR.MINOR, e.g. 1.34)")
    try:
        ipaddress.ip_network(str(cfg.pod_cidr))
    except ValueError as e:
        raise ConfigError(f"Invalid pod network CIDR {cfg.pod_cidr!r}: {e}") from e
    if not str(cfg.user).strip():
        raise ConfigError("Target user must not be empty")
    return cfg


def load_bootstrap_config(
    *,
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> BootstrapConfig:
    """Resolve bootstrap settings: defaults < YAML file < environment < overrides."""

    env = os.environ if environ is None else environ
    cfg = BootstrapConfig(user=invoking_user(env))

    if config_path:
        raw = load_config_file(config_path)
        cfg = replace(cfg, **_coerce(BootstrapConfig, raw.get("kube") or {}, "kube"))

    if env.get("K8S_VERSION"):
        cfg = replace(cfg, k8s_version=env["K8S_VERSION"])
    if env.get("POD_CIDR"):
        cfg = replace(cfg, pod_cidr=env["POD_CIDR"])

    cfg = replace(cfg, **{k: v for k, v in (overrides or {}).items() if v is not None})
    return validate_bootstrap(cfg)


def load_shell_config(
    *,
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ShellConfig:
    """Resolve shell installer settings: defaults < YAML file < environment < overrides."""

    env = os.environ if environ is None else environ
    cfg = ShellConfig(user=invoking_user(env))

    if config_path:
        raw = load_config_file(config_path)
        cfg = replace(cfg, **_coerce(ShellConfig, raw.get("shell") or {}, "shell"))

    if env.get("ZSH_CUSTOM"):
        cfg = replace(cfg, zsh_custom=env["ZSH_CUSTOM"])

    cfg = replace(cfg, **{k: v for k, v in (overrides or {}).items() if v is not None})
    if not str(cfg.user).strip():
        raise ConfigError("Target user must not be empty")
    return cfg
