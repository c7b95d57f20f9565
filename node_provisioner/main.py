from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, Optional, Tuple

from . import __version__
from .config import BootstrapConfig, ShellConfig, load_bootstrap_config, load_shell_config
from .lib.users import TargetUser, resolve_user
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import PipelineResult, RunContext, run_pipeline
from .state_store import save_report
from .steps.kube import (
    ClusterInfoStep,
    ConfigureKubectlStep,
    DisableSwapStep,
    InstallCniStep,
    InstallContainerdStep,
    InstallKubernetesStep,
    InstallPrerequisitesStep,
    KernelModulesStep,
    KubeadmInitStep,
    KubectlAliasStep,
    KubernetesRepoStep,
    SysctlStep,
    UntaintControlPlaneStep,
)
from .steps.shell import (
    ChangeShellStep,
    ConfigurePluginsStep,
    InstallOhMyZshStep,
    InstallPluginsStep,
    InstallZshStep,
)

logger = logging.getLogger(__name__)


def build_kube_steps():
    return [
        InstallPrerequisitesStep(),
        DisableSwapStep(),
        KernelModulesStep(),
        SysctlStep(),
        InstallContainerdStep(),
        KubernetesRepoStep(),
        InstallKubernetesStep(),
        KubeadmInitStep(),
        ConfigureKubectlStep(),
        InstallCniStep(),
        UntaintControlPlaneStep(),
        KubectlAliasStep(),
        ClusterInfoStep(),
    ]


def build_shell_steps():
    return [
        InstallZshStep(),
        InstallOhMyZshStep(),
        InstallPluginsStep(),
        ConfigurePluginsStep(),
        ChangeShellStep(),
    ]


def require_root(*, dry_run: bool = False) -> None:
    if os.geteuid() == 0:
        return
    if dry_run:
        logger.warning("Not running as root; continuing because this is a dry run.")
        return
    raise PermissionError("Run as root (use sudo).")


def run_bootstrap(
    cfg: BootstrapConfig,
    *,
    user: Optional[TargetUser] = None,
    dry_run: bool = False,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> Tuple[RunContext, PipelineResult]:
    """Bootstrap a single-node control plane. Nothing is rolled back on failure."""

    require_root(dry_run=dry_run)
    ctx = RunContext(config=cfg, user=user or resolve_user(cfg.user), dry_run=dry_run)
    logger.debug("Bootstrapping Kubernetes v%s for user %s", cfg.k8s_version, ctx.user.name)

    result = run_pipeline(ctx=ctx, steps=build_kube_steps(), start_at=start_at, stop_after=stop_after)
    return ctx, result


def run_shell_setup(
    cfg: ShellConfig,
    *,
    user: Optional[TargetUser] = None,
    dry_run: bool = False,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> Tuple[RunContext, PipelineResult]:
    """Install zsh, Oh My Zsh and plugins, and make zsh the login shell."""

    ctx = RunContext(config=cfg, user=user or resolve_user(cfg.user), dry_run=dry_run)
    result = run_pipeline(ctx=ctx, steps=build_shell_steps(), start_at=start_at, stop_after=stop_after)
    if result.succeeded:
        logger.info("Installation completed! Please restart your terminal or run 'source ~/.zshrc' to apply changes.")
    return ctx, result


def _plain(cfg: Any) -> Dict[str, Any]:
    # tuples -> lists, Paths -> str; keeps the report safe for yaml.safe_dump
    return json.loads(json.dumps(asdict(cfg), default=str))


def build_report(command: str, ctx: RunContext, result: PipelineResult) -> Dict[str, Any]:
    return {
        "version": __version__,
        "command": command,
        "user": ctx.user.name,
        "dry_run": ctx.dry_run,
        "config": _plain(ctx.config),
        "summary": result.summary(),
        "decisions": json.loads(json.dumps(ctx.decisions, default=str)),
    }


def _parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=None, help="YAML file with `kube:` / `shell:` overrides")
    common.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to provisioning log")
    common.add_argument("--report", default=None, help="Write a run report (json|yaml) to this path")
    common.add_argument("--start-at", default=None, help="Start at step_id (e.g. 60_kubeadm_init)")
    common.add_argument("--stop-after", default=None, help="Stop after step_id")
    common.add_argument("--dry-run", action="store_true", help="Log commands and file writes without running them")
    common.add_argument("-v", "--verbose", action="store_true", help="Show debug output on the console")
    common.add_argument("--user", default=None, help="Target user (default: $SUDO_USER, $USER, root)")

    p = argparse.ArgumentParser(prog="node-provisioner")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = p.add_subparsers(dest="command", required=True)

    kube = sub.add_parser("kube", parents=[common], help="Bootstrap a single-node Kubernetes control plane")
    kube.add_argument("--k8s-version", default=None, help="Kubernetes minor version (default: $K8S_VERSION or 1.34)")
    kube.add_argument("--pod-cidr", default=None, help="Pod network CIDR (default: $POD_CIDR or 10.244.0.0/16)")

    sub.add_parser("shell", parents=[common], help="Install zsh, Oh My Zsh and plugins")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = _parser().parse_args(argv)
    configure_logging(log_path=args.log, level=logging.DEBUG if args.verbose else logging.INFO)

    run_kwargs = dict(dry_run=args.dry_run, start_at=args.start_at, stop_after=args.stop_after)
    try:
        if args.command == "kube":
            cfg = load_bootstrap_config(
                config_path=args.config,
                overrides={"k8s_version": args.k8s_version, "pod_cidr": args.pod_cidr, "user": args.user},
            )
            ctx, result = run_bootstrap(cfg, **run_kwargs)
        else:
            cfg = load_shell_config(config_path=args.config, overrides={"user": args.user})
            ctx, result = run_shell_setup(cfg, **run_kwargs)
    except PermissionError as e:
        logger.error("%s", e)
        return 1
    except (ValueError, LookupError, FileNotFoundError) as e:
        logger.error("%s", e)
        return 1

    if args.report:
        save_report(args.report, build_report(args.command, ctx, result))

    return result.exit_code


def main_kube(argv: Optional[list[str]] = None) -> int:
    return main(["kube", *(sys.argv[1:] if argv is None else argv)])


def main_shell(argv: Optional[list[str]] = None) -> int:
    return main(["shell", *(sys.argv[1:] if argv is None else argv)])
