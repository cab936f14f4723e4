"""
release_kit
-----------

AWS Lambda 함수 코드를 git 태그 기반으로 릴리스하는 CLI 패키지.
작업 트리 점검, 릴리스 태그 생성/검증, 스키마 변경 확인을 거친 뒤에만
패키징 및 업로드를 수행하는 것을 목표로 한다.
"""

__all__ = [
    "config",
    "orchestrator",
]
