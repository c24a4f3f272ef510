"""
wt init: print the shell integration wrapper.

The wrapper runs the real ``wt`` and, when it exits 0 and printed a
directory, changes into it. Anything else is echoed and the exit code is
passed through.

Usage:
    eval "$(wt init zsh)"      # ~/.zshrc
    eval "$(wt init bash)"     # ~/.bashrc
    wt init fish | source      # ~/.config/fish/config.fish
"""

import typer

from wt.cli.errors import handle_error
from wt.core.errors import WtError

_POSIX_WRAPPER = """\
wt() {
  local output
  output=$(command wt "$@")
  local exit_code=$?

  if [[ $exit_code -eq 0 && -d "$output" ]]; then
    cd "$output"
  else
    echo "$output"
    return $exit_code
  fi
}"""

SHELL_SCRIPTS = {
    "zsh": _POSIX_WRAPPER,
    "bash": _POSIX_WRAPPER,
    "fish": """\
function wt
    set -l output (command wt $argv)
    set -l exit_code $status

    if test $exit_code -eq 0 -a -d "$output"
        cd "$output"
    else
        echo "$output"
        return $exit_code
    end
end""",
}


def shell_script(shell: str) -> str:
    """
    Wrapper script for a shell.

    Raises:
        WtError: If the shell is not zsh, bash or fish
    """
    script = SHELL_SCRIPTS.get(shell.lower())
    if script is None:
        supported = ", ".join(SHELL_SCRIPTS)
        raise WtError(f"Unsupported shell: {shell}\nSupported shells: {supported}")
    return script


def main(
    shell: str = typer.Argument(..., help="Shell type (zsh, bash, fish)"),
) -> None:
    """
    Output shell integration script.

    Examples:
        eval "$(wt init zsh)"
    """
    try:
        typer.echo(shell_script(shell))
    except WtError as e:
        handle_error(e)
