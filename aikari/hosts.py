"""Ensuring an entry exists in the system hosts file."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional, Union

from aikari.logger import get_logger
from aikari.strings import expand_env

_NETWORK_DB_REG_KEY_PATH = r"SYSTEM\CurrentControlSet\Services\Tcpip\Parameters"
_NETWORK_DB_REG_ENTRY_NAME = "DataBasePath"
_DEFAULT_HOST_DIR = r"%SystemRoot%\System32\drivers\etc"
_DEFAULT_HOST_DIR_EXPANDED = r"C:\Windows\System32\drivers\etc"


def _read_windows_hosts_dir() -> str:
    import winreg

    with winreg.OpenKey(
        winreg.HKEY_LOCAL_MACHINE, _NETWORK_DB_REG_KEY_PATH, 0, winreg.KEY_READ
    ) as key:
        value, value_type = winreg.QueryValueEx(key, _NETWORK_DB_REG_ENTRY_NAME)
    if value_type not in (winreg.REG_SZ, winreg.REG_EXPAND_SZ):
        raise OSError("Unsupported key type, only REG_*SZ is supported.")
    return str(value)


def default_hosts_dir() -> Path:
    """Return the directory that holds the system hosts file."""
    if sys.platform != "win32":
        return Path("/etc")

    log = get_logger()
    try:
        host_dir = _read_windows_hosts_dir()
    except OSError as err:
        log.error("Unexpected error occurred querying hostPath: %s", err)
        log.error("Assuming to use the default path.")
        host_dir = _DEFAULT_HOST_DIR

    expanded = expand_env(host_dir)
    if "%" in expanded:
        log.error("Unexpected error occurred expanding env vars in hostPath.")
        log.error("Assuming to use the default expanded path.")
        expanded = _DEFAULT_HOST_DIR_EXPANDED
    else:
        log.debug("Successfully parsed host path, result: %s", expanded)
    return Path(expanded)


def ensure_host_line(
    host_line: str, hosts_dir: Optional[Union[str, os.PathLike]] = None
) -> bool:
    """Append ``host_line`` to the hosts file unless a line already holds it.

    Returns True only when the line was appended, meaning processes that
    cached the old resolution need to be restarted.
    """
    log = get_logger()
    directory = Path(hosts_dir) if hosts_dir is not None else default_hosts_dir()
    hosts_path = directory / "hosts"

    if not hosts_path.exists():
        log.error("Failed to write host: hosts file not found.")
        return False

    try:
        with hosts_path.open("r", encoding="utf-8", errors="replace") as hosts_file:
            if any(host_line in line for line in hosts_file):
                log.info("Found target line in hosts file, no need to kill swCore.")
                return False
    except OSError:
        log.error("Failed to write host: hosts file failed to open.")
        return False

    try:
        with hosts_path.open("a", encoding="utf-8") as hosts_file:
            hosts_file.write("\n" + host_line)
    except OSError:
        log.error(
            "Failed to get write access to hosts file, are you running "
            "with Administrator privilege?"
        )
        return False

    log.info("Successfully appended `%s` into hosts file;", host_line)
    return True