import pytest

from node_provisioner import main as main_mod
from node_provisioner.main import main, main_kube, main_shell
from node_provisioner.state_store import load_report


@pytest.fixture
def clean_env(monkeypatch):
    for var in ("K8S_VERSION", "POD_CIDR", "ZSH_CUSTOM", "SUDO_USER"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("USER", "alice")


@pytest.fixture
def config_file(tmp_path, host_root):
    path = tmp_path / "provision.yaml"
    path.write_text(f"kube:\n  root: {host_root}\n")
    return path


@pytest.fixture
def resolves_alice(monkeypatch, alice):
    monkeypatch.setattr(main_mod, "resolve_user", lambda name: alice)


def test_non_root_exits_one_before_any_command(monkeypatch, clean_env, fake_commands, tmp_path):
    monkeypatch.setattr("os.geteuid", lambda: 1000)

    assert main(["kube", "--log", str(tmp_path / "p.log")]) == 1
    assert fake_commands.calls == []
    assert "Run as root (use sudo)." in (tmp_path / "p.log").read_text()


def test_successful_run_writes_report(as_root, clean_env, kube_host, config_file, resolves_alice, tmp_path):
    report = tmp_path / "report.yaml"

    rc = main(
        [
            "kube",
            "--config", str(config_file),
            "--k8s-version", "1.31",
            "--log", str(tmp_path / "p.log"),
            "--report", str(report),
        ]
    )

    assert rc == 0
    data = load_report(str(report))
    assert data["command"] == "kube"
    assert data["user"] == "alice"
    assert data["config"]["k8s_version"] == "1.31"
    assert data["summary"]["exit_code"] == 0
    assert data["summary"]["failed_step"] is None
    assert data["decisions"]["kubernetes_repo"].endswith("/v1.31/deb/")


def test_failing_command_sets_exit_code(as_root, clean_env, kube_host, config_file, resolves_alice, tmp_path):
    kube_host.on("apt-get", "install", returncode=100)
    report = tmp_path / "report.json"

    rc = main_kube(["--config", str(config_file), "--log", str(tmp_path / "p.log"), "--report", str(report)])

    assert rc == 100
    summary = load_report(str(report))["summary"]
    assert summary["failed_step"] == "10_install_prerequisites"
    assert summary["ran_steps"] == []
    assert not kube_host.ran("kubeadm")


def test_invalid_configuration_exits_one(as_root, clean_env, fake_commands, tmp_path):
    rc = main(["kube", "--pod-cidr", "not-a-cidr", "--log", str(tmp_path / "p.log")])

    assert rc == 1
    assert fake_commands.calls == []


def test_unknown_step_exits_one(as_root, clean_env, kube_host, config_file, resolves_alice, tmp_path):
    rc = main(["kube", "--config", str(config_file), "--start-at", "99_nope", "--log", str(tmp_path / "p.log")])

    assert rc == 1
    assert kube_host.calls == []


def test_shell_entry_point(clean_env, shell_host, resolves_alice, alice, tmp_path):
    rc = main_shell(["--log", str(tmp_path / "p.log")])

    assert rc == 0
    assert (alice.home / ".zshrc").read_text().count("plugins=(") == 1
    assert "Installation completed!" in (tmp_path / "p.log").read_text()


def test_subcommand_is_required():
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2
