"""Core 도메인 - 모델, 설정, 포트"""
