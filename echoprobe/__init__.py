"""
echoprobe - 诊断用 HTTP 回显服务
"""
__version__ = "0.3.5"
