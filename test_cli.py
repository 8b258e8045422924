"""
Tests for the mpw command line.

Tests cover:
- Help and version output
- Exit codes (unknown type, missing master password, failures)
- Input sources: flags, MPW_* environment, prompts, file descriptor
- Clipboard output
"""
import io
import os

import pytest

from masterpw import cli, config
from masterpw.exceptions import KeyDerivationFailed


ENV_VARS = (
    config.ENV_FULLNAME,
    config.ENV_SITE,
    config.ENV_SITECOUNTER,
    config.ENV_PWTYPE,
    config.ENV_MASTERPASSWORD,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """No MPW_* variable leaks in from the developer's shell."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def derive_calls(monkeypatch):
    """Replace the (slow) derivation with a recorder."""
    calls = []

    def fake_derive(username, site_name, counter, password_type, master_password):
        calls.append((username, site_name, counter, password_type, master_password))
        return "Fake1!password"

    monkeypatch.setattr(cli, "derive_password", fake_derive)
    return calls


# --- Help / version ---

def test_help_lists_password_types(capsys):
    assert cli.main(["-h"]) == cli.EXIT_OK
    err = capsys.readouterr().err
    assert "Usage: mpw" in err
    assert "x | 20 characters, contains symbols" in err
    assert "p | 20 character sentence" in err
    assert err.index(" b | ") < err.index(" x | ")


def test_version(capsys):
    assert cli.main(["--version"]) == cli.EXIT_OK
    assert "mpw 1.0.0" in capsys.readouterr().err


# --- Exit codes ---

def test_unknown_password_type_exits_before_prompting(monkeypatch, capsys, derive_calls):
    def no_prompt(prompt):
        raise AssertionError("prompted for " + prompt)

    monkeypatch.setattr(cli, "prompt_for_input", no_prompt)
    assert cli.main(["-t", "z", "example.com"]) == cli.EXIT_BAD_PASSWORD_TYPE
    assert "Unknown password type: z" in capsys.readouterr().err
    assert derive_calls == []


def test_missing_master_password(monkeypatch, capsys, derive_calls):
    monkeypatch.setattr(cli.getpass, "getpass", lambda *args, **kwargs: "")
    assert cli.main(["-u", "alice", "example.com"]) == cli.EXIT_MISSING_PASSWORD
    assert "Missing master password" in capsys.readouterr().err
    assert derive_calls == []


def test_derivation_failure(monkeypatch, capsys):
    def failing_derive(*args):
        raise KeyDerivationFailed("scrypt key derivation failed: boom")

    monkeypatch.setattr(cli, "derive_password", failing_derive)
    monkeypatch.setenv(config.ENV_MASTERPASSWORD, "secret")
    assert cli.main(["-u", "alice", "example.com"]) == cli.EXIT_ERROR
    assert "Failure: scrypt key derivation failed: boom" in capsys.readouterr().err


def test_counter_out_of_range(monkeypatch, capsys):
    monkeypatch.setenv(config.ENV_MASTERPASSWORD, "secret")
    assert cli.main(["-u", "alice", "-c", "-1", "example.com"]) == cli.EXIT_ERROR
    assert "counter" in capsys.readouterr().err


# --- Input sources ---

def test_flags_and_env_master_password(monkeypatch, capsys):
    monkeypatch.setenv(config.ENV_MASTERPASSWORD, "chahc7maengohX9u")
    code = cli.main(["-u", "IeS1ohch,", "-c", "11", "-t", "l", "fiex2phooGhaeR0e"])
    assert code == cli.EXIT_OK
    # Not a terminal: no trailing newline
    assert capsys.readouterr().out == "Luco5%FalzKoju"


def test_environment_defaults(monkeypatch, capsys):
    monkeypatch.setenv(config.ENV_FULLNAME, "Wieph2oo,")
    monkeypatch.setenv(config.ENV_SITE, "die0ooj3chiGhiaX")
    monkeypatch.setenv(config.ENV_SITECOUNTER, "0x14")
    monkeypatch.setenv(config.ENV_PWTYPE, "i")
    monkeypatch.setenv(config.ENV_MASTERPASSWORD, "quaJu8aeTh7vienu")
    assert cli.main([]) == cli.EXIT_OK
    assert capsys.readouterr().out == "0931"


def test_master_password_from_fd(capsys):
    read_fd, write_fd = os.pipe()
    os.write(write_fd, b"Roihiy7Phah4choo\nignored second line\n")
    os.close(write_fd)
    try:
        code = cli.main(["-u", "juighaB5,", "-c", "25", "-t", "m",
                         "-m", str(read_fd), "kaNeiw4aiw1waeDi"])
    finally:
        os.close(read_fd)
    assert code == cli.EXIT_OK
    assert capsys.readouterr().out == "RogDup7#"


def test_prompts_for_missing_inputs(monkeypatch, capsys, derive_calls):
    monkeypatch.setattr(cli.sys, "stdin", io.StringIO("alice\nexample.com\n"))
    monkeypatch.setattr(cli.getpass, "getpass", lambda *args, **kwargs: "secret")
    assert cli.main([]) == cli.EXIT_OK
    err = capsys.readouterr().err
    assert "Username: " in err
    assert "Site: " in err
    assert derive_calls == [("alice", "example.com", 1, "l", b"secret")]


def test_positional_site_wins_over_env(monkeypatch, derive_calls):
    monkeypatch.setenv(config.ENV_SITE, "from-env.com")
    monkeypatch.setenv(config.ENV_MASTERPASSWORD, "secret")
    assert cli.main(["-u", "alice", "from-arg.com"]) == cli.EXIT_OK
    assert derive_calls[0][1] == "from-arg.com"


def test_invalid_counter_env_falls_back(monkeypatch):
    monkeypatch.setenv(config.ENV_SITECOUNTER, "abc")
    assert config.default_counter() == 1
    monkeypatch.setenv(config.ENV_SITECOUNTER, " 7 ")
    assert config.default_counter() == 7


def test_empty_pwtype_env_uses_default(monkeypatch):
    monkeypatch.setenv(config.ENV_PWTYPE, "")
    assert config.default_password_type() == "l"


# --- Clipboard ---

def test_copy_to_clipboard(monkeypatch, capsys, derive_calls):
    copied = []
    monkeypatch.setattr(cli.pyperclip, "copy", copied.append)
    monkeypatch.setenv(config.ENV_MASTERPASSWORD, "secret")
    assert cli.main(["--copy", "-u", "alice", "example.com"]) == cli.EXIT_OK
    out = capsys.readouterr()
    assert copied == ["Fake1!password"]
    assert out.out == ""
    assert "copied to clipboard" in out.err


def test_copy_without_clipboard(monkeypatch, capsys, derive_calls):
    def no_clipboard(text):
        raise cli.pyperclip.PyperclipException("no copy mechanism")

    monkeypatch.setattr(cli.pyperclip, "copy", no_clipboard)
    monkeypatch.setenv(config.ENV_MASTERPASSWORD, "secret")
    assert cli.main(["--copy", "-u", "alice", "example.com"]) == cli.EXIT_ERROR
    assert "clipboard unavailable" in capsys.readouterr().err
