"""
Shared services module

직접 경로 임포트 사용 원칙
- 의존성 명확성: 각 모듈이 실제 사용하는 서비스만 임포트

사용법:
❌ from shared.services import TableSchemaParser
✅ from shared.services.table_schema_parser import TableSchemaParser

모든 임포트는 직접 경로를 사용하세요:
- shared.services.table_schema_parser
- shared.services.column_type_inference
- shared.services.delimited_text
- shared.services.paste_reconciler
- shared.services.edit_buffer
- shared.services.bulk_save_reconciler
- shared.services.table_metrics
- shared.services.service_factory
"""

__all__ = []  # 직접 경로 임포트 강제
