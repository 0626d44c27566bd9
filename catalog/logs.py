import json, time, uuid, logging
from typing import Any, Optional

logger = logging.getLogger("catalog.query")


class QueryLogContext:
    """单次目录查询的日志上下文：记录参数、行数与耗时，结束时输出一条 JSON 日志。"""

    def __init__(self, action: str, params: Optional[dict] = None):
        self.action = action
        self.params = params or {}
        self.request_id = str(uuid.uuid4())
        self.start = time.perf_counter()
        self.rows: Optional[int] = None

    def set_rows(self, n: int): self.rows = n

    def to_record(self, result: str = "OK", err: Optional[str] = None) -> dict[str, Any]:
        return {
            "action": self.action,
            "request_id": self.request_id,
            "params": self.params,
            "rows": self.rows,
            "result": result,
            "err_msg": err,
            "latency_ms": int((time.perf_counter() - self.start) * 1000),
        }

    def write(self, result: str = "OK", err: Optional[str] = None):
        rec = self.to_record(result, err)
        level = logging.INFO if result == "OK" else logging.ERROR
        logger.log(level, json.dumps(rec, ensure_ascii=False, default=str))
        return rec
