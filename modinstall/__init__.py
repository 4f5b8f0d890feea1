"""
ModInstall - Minecraft 模组开发项目的模组安装工具

从 Modrinth 安装模组及其必需依赖，并清理不再被使用的依赖库。
"""

__version__ = "1.0.0"
