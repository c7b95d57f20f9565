"""
Shared pytest fixtures for node-provisioner tests.

- FakeCommands: replaces subprocess.run for node_provisioner.lib.command and
  answers with canned, prefix-matched results (optionally with side effects
  on the fake host filesystem).
- alice / host_root: a target user and a relocated filesystem root under tmp_path.
"""

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import pytest

from node_provisioner.config import BootstrapConfig, ShellConfig
from node_provisioner.lib import command
from node_provisioner.lib.users import TargetUser

CONTAINERD_DEFAULT_V2 = """\
disabled_plugins = []
version = 2

[plugins]

  [plugins."io.containerd.grpc.v1.cri"]
    enable_selinux = false
    sandbox_image = "registry.k8s.io/pause:3.8"

    [plugins."io.containerd.grpc.v1.cri".containerd]
      default_runtime_name = "runc"

      [plugins."io.containerd.grpc.v1.cri".containerd.runtimes]

        [plugins."io.containerd.grpc.v1.cri".containerd.runtimes.runc]
          runtime_type = "io.containerd.runc.v2"

          [plugins."io.containerd.grpc.v1.cri".containerd.runtimes.runc.options]
            BinaryName = ""
            SystemdCgroup = false
"""

FSTAB = """\
# /etc/fstab: static file system information.
UUID=1111-2222 / ext4 errors=remount-ro 0 1
/swap.img none swap sw 0 0
"""


@dataclass
class Rule:
    prefix: Tuple[str, ...]
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    side_effect: Optional[Callable[[List[str]], None]] = None


def strip_wrappers(argv: List[str]) -> List[str]:
    """Drop `sudo` / `sudo -u USER -H` so rules match the real command."""
    if argv[:2] == ["sudo", "-u"]:
        return argv[4:]
    if argv[:1] == ["sudo"]:
        return argv[1:]
    return argv


class FakeCommands:
    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.inputs: List[Optional[str]] = []
        self._rules: List[Rule] = []

    def on(self, *prefix: str, returncode: int = 0, stdout: str = "", stderr: str = "", side_effect=None) -> None:
        self._rules.append(Rule(tuple(prefix), returncode, stdout, stderr, side_effect))

    def __call__(self, argv, input=None, **kwargs):
        argv = list(argv)
        self.calls.append(argv)
        self.inputs.append(input)
        real = strip_wrappers(argv)
        for rule in reversed(self._rules):
            if tuple(real[: len(rule.prefix)]) == rule.prefix:
                if rule.side_effect is not None:
                    rule.side_effect(real)
                return subprocess.CompletedProcess(argv, rule.returncode, rule.stdout, rule.stderr)
        return subprocess.CompletedProcess(argv, 0, "", "")

    @property
    def commands(self) -> List[List[str]]:
        return [strip_wrappers(c) for c in self.calls]

    def ran(self, *prefix: str) -> bool:
        return any(tuple(c[: len(prefix)]) == prefix for c in self.commands)

    def count(self, *prefix: str) -> int:
        return sum(1 for c in self.commands if tuple(c[: len(prefix)]) == prefix)


@pytest.fixture
def fake_commands(monkeypatch):
    fake = FakeCommands()
    monkeypatch.setattr(command.subprocess, "run", fake)
    return fake


@pytest.fixture(autouse=True)
def _isolate_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
    for attr in ("_node_provisioner_configured", "_node_provisioner_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)


@pytest.fixture
def as_root(monkeypatch):
    monkeypatch.setattr(os, "geteuid", lambda: 0)


@pytest.fixture
def alice(tmp_path) -> TargetUser:
    home = tmp_path / "home" / "alice"
    home.mkdir(parents=True)
    return TargetUser(name="alice", uid=os.getuid(), gid=os.getgid(), home=home, shell="/bin/bash")


@pytest.fixture
def host_root(tmp_path) -> Path:
    root = tmp_path / "host"
    (root / "etc").mkdir(parents=True)
    (root / "etc" / "fstab").write_text(FSTAB, encoding="utf-8")
    return root


@pytest.fixture
def kube_config(host_root) -> BootstrapConfig:
    return BootstrapConfig(user="alice", root=str(host_root))


@pytest.fixture
def kube_host(fake_commands, kube_config):
    """Fake commands wired to behave like a fresh Ubuntu node."""

    def _kubeadm_init(argv):
        kube_config.admin_conf.parent.mkdir(parents=True, exist_ok=True)
        kube_config.admin_conf.write_text("apiVersion: v1\nkind: Config\n", encoding="utf-8")
        os.chmod(kube_config.admin_conf, 0o600)

    fake_commands.on("containerd", "config", "default", stdout=CONTAINERD_DEFAULT_V2)
    fake_commands.on("kubeadm", "init", side_effect=_kubeadm_init)
    fake_commands.on("kubectl", "get", "nodes", stdout="NAME STATUS\nnode1 Ready\n")
    return fake_commands


@pytest.fixture
def shell_config() -> ShellConfig:
    return ShellConfig(user="alice")


@pytest.fixture
def shell_host(fake_commands, alice, monkeypatch):
    """Fake commands that create what the Oh My Zsh installer and git would."""

    def _omz_install(argv):
        (alice.home / ".oh-my-zsh" / "custom" / "plugins").mkdir(parents=True, exist_ok=True)
        (alice.home / ".zshrc").write_text(
            'export ZSH="$HOME/.oh-my-zsh"\nZSH_THEME="robbyrussell"\nplugins=(git)\nsource $ZSH/oh-my-zsh.sh\n',
            encoding="utf-8",
        )

    def _git_clone(argv):
        Path(argv[-1]).mkdir(parents=True, exist_ok=True)

    fake_commands.on("curl", stdout="#!/bin/sh\necho installing\n")
    fake_commands.on("sh", "-s", side_effect=_omz_install)
    fake_commands.on("git", "clone", side_effect=_git_clone)

    import shutil

    monkeypatch.setattr(shutil, "which", lambda name: "/usr/bin/" + name)
    return fake_commands
