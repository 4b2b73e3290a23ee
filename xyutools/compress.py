"""Archive creation and extraction through external command-line tools."""

from __future__ import annotations

import os
import platform
import subprocess
from abc import ABC, abstractmethod
from contextlib import suppress
from typing import Callable, Iterable, Sequence

from . import filebase

Runner = Callable[[Sequence[str]], object]


def _run(args: Sequence[str]) -> subprocess.CompletedProcess:
    return subprocess.run(
        list(args), check=True, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL
    )


def forward_to_backslash(path: str) -> str:
    """Replace every '/' with '\\' so Windows tools find the path."""
    return path.replace("/", "\\")


def _remove_if_exists(path: str) -> None:
    if filebase.check_file_exists(path):
        with suppress(OSError):
            os.remove(path)


class Compressor(ABC):
    """Creates and extracts zip, tar.gz and tar.bz2 archives.

    A failing tool raises subprocess.CalledProcessError, a missing tool
    FileNotFoundError.
    """

    def __init__(self, runner: Runner | None = None) -> None:
        self._runner = runner or _run

    def _execute(self, args: Sequence[str]) -> None:
        self._runner(list(args))

    def init(self) -> None:
        """Check that the archiver can be started."""
        self._execute(["HaoZipC"])

    @abstractmethod
    def compress_zip(self, zip_addr: str, file_addr: str) -> None:
        """Add one file or directory to a zip archive."""

    @abstractmethod
    def compress_zip_all(self, zip_addr: str, file_addrs: Iterable[str]) -> None:
        """Add several files, given by absolute paths, to a zip archive."""

    @abstractmethod
    def uncompress_zip(self, zip_addr: str, file_addr: str) -> None:
        """Extract from a zip archive; a directory target ends with '/'."""

    @abstractmethod
    def compress_tar_gz_all(self, tar_addr: str, file_addrs: Iterable[str]) -> None:
        """Pack several files into a tar.gz archive."""

    @abstractmethod
    def uncompress_tar_gz(self, tar_addr: str, file_addr: str) -> None:
        """Extract from a tar.gz archive."""

    @abstractmethod
    def compress_tar_bzip2(self, tar_addr: str, file_addr: str) -> None:
        """Pack one file into a tar.bz2 archive."""

    @abstractmethod
    def compress_tar_bzip2_all(self, tar_addr: str, file_addrs: Iterable[str]) -> None:
        """Pack several files into a tar.bz2 archive."""


class LinuxCompressor(Compressor):
    """Uses zip, unzip and tar."""

    def compress_zip(self, zip_addr: str, file_addr: str) -> None:
        self._execute(["zip", zip_addr, file_addr])

    def compress_zip_all(self, zip_addr: str, file_addrs: Iterable[str]) -> None:
        for file_addr in file_addrs:
            self._execute(["zip", zip_addr, file_addr])

    def uncompress_zip(self, zip_addr: str, file_addr: str) -> None:
        if not filebase.check_file_exists(zip_addr):
            raise FileNotFoundError("Zip file not found")
        self._execute(["unzip", zip_addr, file_addr])

    def compress_tar_gz_all(self, tar_addr: str, file_addrs: Iterable[str]) -> None:
        for file_addr in file_addrs:
            self._execute(["tar", "-zcvf", tar_addr, file_addr])

    def uncompress_tar_gz(self, tar_addr: str, file_addr: str) -> None:
        if not filebase.check_file_exists(tar_addr):
            raise FileNotFoundError("tar.gz file not found")
        self._execute(["tar", "-zvf", tar_addr, file_addr])

    def compress_tar_bzip2(self, tar_addr: str, file_addr: str) -> None:
        self._execute(["tar", "-jcvf", tar_addr, file_addr])

    def compress_tar_bzip2_all(self, tar_addr: str, file_addrs: Iterable[str]) -> None:
        for file_addr in file_addrs:
            self._execute(["tar", "-jcvf", tar_addr, file_addr])


class WindowsCompressor(Compressor):
    """Uses the HaoZipC command-line archiver."""

    def compress_zip(self, zip_addr: str, file_addr: str) -> None:
        self._execute(
            ["HaoZipC", "a", "-y", "-tzip", forward_to_backslash(zip_addr), forward_to_backslash(file_addr)]
        )

    def compress_zip_all(self, zip_addr: str, file_addrs: Iterable[str]) -> None:
        for file_addr in file_addrs:
            self.compress_zip(zip_addr, file_addr)

    def _extract(self, archive: str, file_addr: str) -> None:
        directory, _ = filebase.get_file_path(file_addr)
        self._execute(["HaoZipC", "e", "-y", archive, "-o" + directory])

    def uncompress_zip(self, zip_addr: str, file_addr: str) -> None:
        if not filebase.check_file_exists(zip_addr):
            raise FileNotFoundError("Zip file not found")
        self._extract(zip_addr, file_addr)

    def _pack_tar(self, tar_name: str, file_addrs: Iterable[str]) -> None:
        for file_addr in file_addrs:
            self._execute(
                ["HaoZipC", "a", "-y", "-ttar", forward_to_backslash(tar_name), "-w", forward_to_backslash(file_addr)]
            )

    def _compress_tar(self, tar_addr: str, tar_name: str, archive_type: str) -> None:
        _remove_if_exists(tar_addr)
        self._execute(
            ["HaoZipC", "a", "-y", archive_type, forward_to_backslash(tar_addr), "-w", tar_name]
        )

    def compress_tar_gz_all(self, tar_addr: str, file_addrs: Iterable[str]) -> None:
        tar_name = tar_addr.replace(".tar.gz", ".tar")
        self._pack_tar(tar_name, file_addrs)
        self._compress_tar(tar_addr, tar_name, "-tgzip")

    def uncompress_tar_gz(self, tar_addr: str, file_addr: str) -> None:
        if not filebase.check_file_exists(tar_addr):
            raise FileNotFoundError("tar.gz file not found")
        self._extract(tar_addr, file_addr)

    def compress_tar_bzip2(self, tar_addr: str, file_addr: str) -> None:
        tar_name = tar_addr.replace(".tar.bz2", ".tar")
        if filebase.check_file_exists(tar_name):
            with suppress(OSError):
                os.remove(tar_addr)
        self._pack_tar(tar_name, [file_addr])
        self._compress_tar(tar_addr, tar_name, "-tbzip2")

    def compress_tar_bzip2_all(self, tar_addr: str, file_addrs: Iterable[str]) -> None:
        tar_name = tar_addr.replace(".tar.bz2", ".tar")
        self._pack_tar(tar_name, file_addrs)
        self._compress_tar(tar_addr, tar_name, "-tbzip2")


def compressor_for_platform(system: str | None = None) -> Compressor:
    """The compressor for 'linux' or 'windows'; the running system by default."""
    name = (system or platform.system()).lower()
    if name == "windows":
        return WindowsCompressor()
    if name == "linux":
        return LinuxCompressor()
    raise ValueError(f"unsupported system: {name}")