"""WFH Beacon: Teams 메시지 기반 근무 위치 체크인 수집 서비스."""
