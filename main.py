#!/usr/bin/env python3
"""
神經風格轉換工具

主程式進入點

使用方法:
    uv run main.py                                   # 互動模式
    uv run main.py --content c.jpg --style s.jpg --model model.onnx --out out.png
"""

import sys

from stylizer.cli import main


if __name__ == "__main__":
    sys.exit(main())
