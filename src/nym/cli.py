"""
Command-line entry point for nym.

    nym init                  create the install tree and register PATH
    nym install <version>     download and install a version
    nym use <version>         make an installed version the active one
    nym list                  list installed versions
    nym ls-remote             list published versions
    nym current               print the active version
"""

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from tqdm import tqdm

from nym.environment import register_bin_path
from nym.nym_config import NymConfig
from nym.nym_exceptions import NymException
from nym.nym_logger import NymLogger, configure_logging
from nym.runtime_version_catalog import RemoteCatalogClient
from nym.runtime_version_downloader import ArchiveFetcher, ProgressChannel, ProgressObserver
from nym.runtime_version_installer import ArchiveInstaller
from nym.runtime_version_paths import PathResolver
from nym.runtime_version_switcher import VersionSwitcher

SUGGESTED_VERSION_COUNT = 5


class NymApp:
    """
    Wires the core components together for one command invocation.
    """

    def __init__(self, config: NymConfig, logger: Optional[NymLogger] = None, out: Optional[TextIO] = None):
        self.config = config
        self.logger = logger or NymLogger()
        self.out = out or sys.stdout
        self.paths = PathResolver(config.install_root, config.version_prefix)
        self.catalog = RemoteCatalogClient(config, self.logger)
        self.fetcher = ArchiveFetcher(config, self.catalog, self.logger)
        self.installer = ArchiveInstaller(self.paths, self.logger)
        self.switcher = VersionSwitcher(self.paths, self.logger)

    def echo(self, message: str = "") -> None:
        print(message, file=self.out)

    def cmd_init(self, args: argparse.Namespace) -> int:
        self.echo("Initializing nym")
        self.paths.versions_dir.mkdir(parents=True, exist_ok=True)
        self.echo(f"Created {self.paths.versions_dir}")

        if register_bin_path(str(self.paths.bin_dir), self.logger):
            self.echo(f"Added {self.paths.bin_dir} to PATH. Restart your terminal to pick it up.")
        else:
            self.echo(f"{self.paths.bin_dir} is already on PATH.")
        return 0

    def cmd_install(self, args: argparse.Namespace) -> int:
        version = self.paths.normalize_version(args.version)
        self.echo(f"Installing Node.js {self.config.version_prefix}{version}...")

        if not self.catalog.has_version(version):
            self.echo(f"Version {self.config.version_prefix}{version} does not exist. Latest versions:")
            for candidate in self.catalog.list_available_versions()[:SUGGESTED_VERSION_COUNT]:
                self.echo(f"  {candidate}")
            return 1

        archive_path = self._download_with_progress(version)
        self.echo("Download complete, installing...")
        self.installer.install(version, archive_path)

        self.echo(f"Node.js {self.config.version_prefix}{version} installed.")
        self.echo(f"Run 'nym use {version}' to switch to it.")
        return 0

    def _download_with_progress(self, version: str):
        channel = ProgressChannel(self.config.progress_queue_size)
        bar = tqdm(total=100, desc="Downloading", unit="%", disable=_is_quiet_console(self.out))
        observer = ProgressObserver(
            channel,
            callback=lambda progress: bar.update(progress - bar.n),
            on_close=bar.close,
        ).start()
        try:
            archive_path = self.fetcher.download(version, channel)
        except BaseException:
            channel.close()
            # the download error takes precedence over a display failure
            try:
                observer.join()
            except Exception as e:
                self.logger.log(f"Progress display failed: {e}", logging.WARNING)
            raise

        channel.close()
        observer.join()
        return archive_path

    def cmd_use(self, args: argparse.Namespace) -> int:
        version = self.paths.normalize_version(args.version)
        self.switcher.switch(version)
        self.echo(f"Now using Node.js {self.config.version_prefix}{version}")
        return 0

    def cmd_list(self, args: argparse.Namespace) -> int:
        versions = self.paths.list_installed_versions()
        if not versions:
            self.echo("No Node.js versions installed.")
            return 0

        current = self.paths.current_version()
        self.echo("Installed Node.js versions:")
        for version in versions:
            if version == current:
                self.echo(f"=> {self.config.version_prefix}{version} (current)")
            else:
                self.echo(f"   {self.config.version_prefix}{version}")
        return 0

    def cmd_ls_remote(self, args: argparse.Namespace) -> int:
        versions = self.catalog.list_available_versions()
        if args.limit is not None:
            versions = versions[: args.limit]
        for version in versions:
            self.echo(version)
        return 0

    def cmd_current(self, args: argparse.Namespace) -> int:
        current = self.paths.current_version()
        if current is None:
            self.echo("No version selected.")
            return 1
        self.echo(current)
        return 0


def _is_quiet_console(out: TextIO) -> bool:
    """Progress bars only make sense on an interactive console."""
    isatty = getattr(out, "isatty", None)
    return not (isatty and isatty())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nym", description="nym - Node.js version manager")
    parser.add_argument("--root", help="Install root (default: $NYM_HOME or ~/.nym)")
    parser.add_argument("--config", help="Path to a TOML configuration file")
    parser.add_argument(
        "--verbose", "-v", action="count", default=0,
        help="Increase verbosity (can be used multiple times)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init", help="Create the install tree and add nym to PATH").set_defaults(
        handler=NymApp.cmd_init
    )

    install = subparsers.add_parser("install", help="Download and install a Node.js version")
    install.add_argument("version", help="Exact version, e.g. 18.17.1")
    install.set_defaults(handler=NymApp.cmd_install)

    use = subparsers.add_parser("use", help="Switch to an installed Node.js version")
    use.add_argument("version", help="Installed version, e.g. 18.17.1")
    use.set_defaults(handler=NymApp.cmd_use)

    subparsers.add_parser("list", help="List installed Node.js versions").set_defaults(
        handler=NymApp.cmd_list
    )

    ls_remote = subparsers.add_parser("ls-remote", help="List published Node.js versions")
    ls_remote.add_argument("--limit", type=int, help="Show only the newest N versions")
    ls_remote.set_defaults(handler=NymApp.cmd_ls_remote)

    subparsers.add_parser("current", help="Print the active Node.js version").set_defaults(
        handler=NymApp.cmd_current
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    The main entry point for the command-line interface.

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = NymConfig.load(args.config)
        if args.root:
            config.install_root = args.root
        app = NymApp(config)
        return args.handler(app, args)
    except NymException as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("interrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
