"""aurforge - AUR 包解析与构建编排"""

__version__ = "0.3.0"
