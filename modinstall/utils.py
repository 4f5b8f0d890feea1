import re

_VERSION_SPLIT = re.compile(r"-(?=\d+\.\d+)")


def format_size(size: int) -> str:
    if size >= 1_000_000:
        return f"{size / 1_000_000:.1f} MB"
    if size >= 1_000:
        return f"{size / 1_000:.1f} KB"
    return f"{size} B"


def format_downloads(downloads: int) -> str:
    if downloads >= 1_000_000:
        return f"{downloads / 1_000_000:.1f}M"
    if downloads >= 1_000:
        return f"{downloads / 1_000:.1f}K"
    return str(downloads)


def extract_mod_name(filename: str) -> str:
    """从文件名猜测模组名称（去掉 .jar 和版本号部分）"""
    name = re.sub(r"\.jar$", "", filename, flags=re.IGNORECASE)
    base = _VERSION_SPLIT.split(name, maxsplit=1)[0]
    return base.replace("-", " ").replace("_", " ")


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."
