"""
终端符号主题

启动时探测一次终端是否支持 Unicode，之后作为普通值传给输出函数。
"""

import os
import sys
from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    """输出使用的符号集合"""

    unicode: bool
    check: str
    warn: str
    arrow: str
    bullet: str
    rule: str
    bar_filled: str
    bar_empty: str

    @classmethod
    def unicode_theme(cls) -> "Theme":
        return cls(
            unicode=True,
            check="✓",
            warn="!",
            arrow="→",
            bullet="●",
            rule="─",
            bar_filled="█",
            bar_empty="░",
        )

    @classmethod
    def ascii_theme(cls) -> "Theme":
        return cls(
            unicode=False,
            check="+",
            warn="!",
            arrow=">",
            bullet="*",
            rule="-",
            bar_filled="#",
            bar_empty=".",
        )

    @classmethod
    def detect(cls) -> "Theme":
        """根据环境变量和标准输出编码选择符号集合"""
        if (
            os.environ.get("WT_SESSION")
            or os.environ.get("TERM_PROGRAM") == "vscode"
            or os.environ.get("ConEmuANSI")
        ):
            return cls.unicode_theme()

        encoding = getattr(sys.stdout, "encoding", None) or "utf-8"
        if "UTF" in encoding.upper():
            return cls.unicode_theme()
        return cls.ascii_theme()

    def line(self, width: int = 55) -> str:
        return self.rule * width

    def progress_bar(self, percent: float, width: int = 30) -> str:
        filled = int(percent / 100 * width)
        return self.bar_filled * filled + self.bar_empty * (width - filled)
