from .doubles import FakeAnalyzer, FakeRedis, analysis_json, jpeg_bytes

__all__ = ["FakeAnalyzer", "FakeRedis", "analysis_json", "jpeg_bytes"]
