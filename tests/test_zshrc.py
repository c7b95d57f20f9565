import pytest

from node_provisioner.lib.files import ensure_line
from node_provisioner.lib.zshrc import find_plugins, merge_plugins, set_plugins

WANTED = ["git", "zsh-autosuggestions", "zsh-syntax-highlighting"]


def test_single_line_assignment_is_extended():
    text, changed = set_plugins("ZSH_THEME=x\nplugins=(git)\nsource $ZSH/oh-my-zsh.sh\n", WANTED)

    assert changed
    assert text.splitlines()[1] == "plugins=(git zsh-autosuggestions zsh-syntax-highlighting)"


def test_multi_line_assignment_is_collapsed():
    text, changed = set_plugins("plugins=(\n  git\n  docker # containers\n)\necho hi\n", WANTED)

    assert changed
    assert text == "plugins=(git docker zsh-autosuggestions zsh-syntax-highlighting)\necho hi\n"


def test_paren_inside_comment_does_not_close_array():
    text, changed = set_plugins(
        "plugins=(\n  git\n  docker # (containers)\n  kubectl\n)\nsource $ZSH/oh-my-zsh.sh\n", WANTED
    )

    assert changed
    assert text == (
        "plugins=(git docker kubectl zsh-autosuggestions zsh-syntax-highlighting)\n"
        "source $ZSH/oh-my-zsh.sh\n"
    )


def test_commented_assignment_is_ignored():
    assert find_plugins(["# plugins=(git)", "echo"]) is None


def test_missing_assignment_is_inserted_before_source_line():
    text, changed = set_plugins('export ZSH="$HOME/.oh-my-zsh"\nsource $ZSH/oh-my-zsh.sh\n', WANTED)

    assert changed
    assert text.splitlines()[1] == "plugins=(git zsh-autosuggestions zsh-syntax-highlighting)"
    assert text.splitlines()[2] == "source $ZSH/oh-my-zsh.sh"


def test_missing_assignment_without_source_line_is_appended():
    text, _ = set_plugins("", WANTED)

    assert text == "plugins=(git zsh-autosuggestions zsh-syntax-highlighting)\n"


@pytest.mark.parametrize("runs", [2, 5])
def test_repeated_rewrites_never_duplicate(runs):
    text = "plugins=(git)\n"
    for _ in range(runs):
        text, _ = set_plugins(text, WANTED)

    assert text.count("plugins=(") == 1
    assert text.count("zsh-autosuggestions") == 1


def test_unchanged_file_reports_no_change():
    original = "plugins=(git zsh-autosuggestions zsh-syntax-highlighting)\n"

    assert set_plugins(original, WANTED) == (original, False)


def test_unterminated_assignment_is_an_error():
    with pytest.raises(ValueError, match="Unterminated"):
        set_plugins("plugins=(git\nzsh-autosuggestions\n", WANTED)


def test_merge_keeps_order_and_drops_duplicates():
    assert merge_plugins(["docker", "git", "docker"], ["git", "kubectl"]) == ["docker", "git", "kubectl"]


def test_ensure_line_appends_once(tmp_path):
    rc = tmp_path / ".zshrc"
    rc.write_text("export EDITOR=vim")

    assert ensure_line(rc, "alias k=kubectl") is True
    assert ensure_line(rc, "alias k=kubectl") is False
    assert rc.read_text() == "export EDITOR=vim\nalias k=kubectl\n"
