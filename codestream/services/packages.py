# detects <package>name</package> and <packages>a, b\nc</packages> tags in streamed model output
# chunks arrive in arbitrary pieces, so the tail of what was already scanned is kept and
# prepended to the next chunk; a tag longer than that window is missed

import re
from typing import List

PACKAGE_TAG = re.compile(r"<package>([^<]+)</package>")
PACKAGES_BLOCK = re.compile(r"<packages>(.*?)</packages>", re.DOTALL)
PACKAGE_SEPARATORS = re.compile(r"[\n,]+")

DEFAULT_WINDOW = 100


class PackageScanner:
    def __init__(self, window: int = DEFAULT_WINDOW) -> None:
        self.window = max(0, window)
        self.buffer = ""
        self.packages: List[str] = []  # insertion order, unique

    def feed(self, chunk: str) -> List[str]:
        """Scan one chunk and return the package names seen for the first time."""
        search_text = self.buffer + chunk
        found: List[str] = []

        for match in PACKAGE_TAG.finditer(search_text):
            self._add(match.group(1).strip(), found)

        for match in PACKAGES_BLOCK.finditer(search_text):
            for name in PACKAGE_SEPARATORS.split(match.group(1).strip()):
                self._add(name.strip(), found)

        self.buffer = search_text[-self.window:] if self.window else ""
        return found

    def _add(self, name: str, found: List[str]) -> None:
        # exact, case-sensitive comparison of trimmed names
        if name and name not in self.packages:
            self.packages.append(name)
            found.append(name)
