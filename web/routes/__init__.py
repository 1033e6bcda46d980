"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- accounts: 계정과목, 회계구분, 보조원장
- journals: 분개 생성/전기/승인/취소
- transactions: 거래 → 분개, 결제, 일괄 처리, 월 부과, 결산
- reports: 시산표, 손익계산서, 대차대조표, 명세
- data: 가져오기/내보내기, 스냅샷, CSV
"""
