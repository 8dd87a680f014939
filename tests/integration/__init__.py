"""端点集成测试"""
