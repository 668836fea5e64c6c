"""
Tests for PATH registration.
"""

import subprocess

import pytest

from nym.environment import PathRegistrar, register_bin_path
from nym.environment.path_registration import PROFILE_MARKER
from nym.nym_exceptions import EnvironmentRegistrationError

BIN = "/home/user/.nym/current/bin"


class TestProfileRegistration:
    """Tests for Linux and macOS shell profiles."""

    def test_linux_appends_to_bashrc(self, logger, tmp_path):
        """Test that Linux appends the export block to .bashrc."""
        (tmp_path / ".bashrc").write_text("alias ll='ls -l'\n")
        registrar = PathRegistrar(logger, system="Linux", home=str(tmp_path))

        assert registrar.register(BIN) is True

        content = (tmp_path / ".bashrc").read_text()
        assert content.startswith("alias ll='ls -l'\n")
        assert PROFILE_MARKER in content
        assert f'export PATH="{BIN}:$PATH"' in content

    def test_creates_missing_profile(self, logger, tmp_path):
        """Test that a missing profile is created."""
        registrar = PathRegistrar(logger, system="Linux", home=str(tmp_path))

        registrar.register(BIN)

        assert BIN in (tmp_path / ".bashrc").read_text()

    def test_is_idempotent(self, logger, tmp_path):
        """Test that registering twice writes the block once."""
        registrar = PathRegistrar(logger, system="Linux", home=str(tmp_path))

        assert registrar.register(BIN) is True
        assert registrar.register(BIN) is False
        assert (tmp_path / ".bashrc").read_text().count(BIN) == 1

    def test_darwin_prefers_zshrc(self, logger, tmp_path):
        """Test that macOS uses .zshrc when it exists."""
        (tmp_path / ".zshrc").write_text("")
        registrar = PathRegistrar(logger, system="Darwin", home=str(tmp_path))

        assert registrar.profile_path() == tmp_path / ".zshrc"

    def test_darwin_falls_back_to_bash_profile(self, logger, tmp_path):
        """Test that macOS falls back to .bash_profile."""
        registrar = PathRegistrar(logger, system="Darwin", home=str(tmp_path))

        registrar.register(BIN)

        assert BIN in (tmp_path / ".bash_profile").read_text()

    def test_unwritable_profile(self, logger, tmp_path):
        """Test that a profile that cannot be written raises EnvironmentRegistrationError."""
        (tmp_path / ".bashrc").mkdir()
        registrar = PathRegistrar(logger, system="Linux", home=str(tmp_path))

        with pytest.raises(EnvironmentRegistrationError):
            registrar.register(BIN)


class FakePowerShell:
    def __init__(self, user_path):
        self.user_path = user_path
        self.commands = []

    def __call__(self, args, **kwargs):
        command = args[-1]
        self.commands.append(command)
        if command.startswith("[Environment]::GetEnvironmentVariable"):
            return subprocess.CompletedProcess(args, 0, stdout=self.user_path + "\r\n", stderr="")
        return subprocess.CompletedProcess(args, 0, stdout="", stderr="")


class TestWindowsRegistration:
    """Tests for the user-level PATH on Windows."""

    WIN_BIN = r"C:\Users\me\.nym\current\bin"

    def test_appends_to_user_path(self, logger, tmp_path, monkeypatch):
        """Test that the bin directory is appended to the user PATH."""
        shell = FakePowerShell(r"C:\Tools;C:\Python")
        monkeypatch.setattr(subprocess, "run", shell)
        registrar = PathRegistrar(logger, system="Windows", home=str(tmp_path))

        assert registrar.register(self.WIN_BIN) is True

        assert len(shell.commands) == 2
        assert shell.commands[1] == (
            "[Environment]::SetEnvironmentVariable('PATH',"
            rf"'C:\Tools;C:\Python;{self.WIN_BIN}','User')"
        )

    def test_existing_entry_is_left_alone(self, logger, tmp_path, monkeypatch):
        """Test that an existing PATH entry is not added again."""
        shell = FakePowerShell(rf"C:\Tools;{self.WIN_BIN}")
        monkeypatch.setattr(subprocess, "run", shell)
        registrar = PathRegistrar(logger, system="Windows", home=str(tmp_path))

        assert registrar.register(self.WIN_BIN) is False
        assert len(shell.commands) == 1

    def test_quotes_are_escaped(self, logger, tmp_path, monkeypatch):
        """Test that single quotes in PATH are escaped for PowerShell."""
        shell = FakePowerShell(r"C:\O'Brien\bin")
        monkeypatch.setattr(subprocess, "run", shell)
        registrar = PathRegistrar(logger, system="Windows", home=str(tmp_path))

        registrar.register(self.WIN_BIN)

        assert r"C:\O''Brien\bin" in shell.commands[1]

    def test_powershell_failure(self, logger, tmp_path, monkeypatch):
        """Test that a failing PowerShell command raises EnvironmentRegistrationError."""
        def fail(args, **kwargs):
            raise subprocess.CalledProcessError(1, args, stderr="denied")

        monkeypatch.setattr(subprocess, "run", fail)
        registrar = PathRegistrar(logger, system="Windows", home=str(tmp_path))

        with pytest.raises(EnvironmentRegistrationError):
            registrar.register(self.WIN_BIN)

    def test_missing_powershell(self, logger, tmp_path, monkeypatch):
        """Test that a missing PowerShell raises EnvironmentRegistrationError."""
        def missing(args, **kwargs):
            raise FileNotFoundError("powershell")

        monkeypatch.setattr(subprocess, "run", missing)
        registrar = PathRegistrar(logger, system="Windows", home=str(tmp_path))

        with pytest.raises(EnvironmentRegistrationError):
            registrar.register(self.WIN_BIN)


class TestRegisterBinPath:
    """Tests for the module-level helper used by nym init."""

    def test_registers_in_home_profile(self, logger, tmp_path, monkeypatch):
        """Test that the helper writes to the profile in the user's home directory."""
        monkeypatch.setattr("nym.environment.path_registration.expand", lambda path: str(tmp_path))

        assert register_bin_path(BIN, logger, system="Linux") is True
        assert register_bin_path(BIN, logger, system="Linux") is False
        assert (tmp_path / ".bashrc").read_text().count(BIN) == 1
