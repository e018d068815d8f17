"""
神經風格轉換工具

載入雙輸入（內容 + 風格）風格轉換模型，執行一次推論並輸出圖片
"""

__version__ = "0.1.0"
