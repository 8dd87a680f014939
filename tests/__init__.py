"""
测试模块

包含项目的单元测试和集成测试。

测试结构:
- test_*.py: 配置、模型与转换器的单元测试
- integration/: 端点集成测试（上游由 httpx.MockTransport 模拟）
- fixtures.py: 示例配置与模拟上游
"""
