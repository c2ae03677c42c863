from __future__ import annotations

import json
import sys
from pathlib import Path

from fastapi.openapi.utils import get_openapi

from app.api.main import app


def main(target: Path | None = None) -> Path:
    spec = get_openapi(
        title=app.title,
        version="1.0.0",
        description="Inventory API: products, categories, suppliers and stock levels",
        routes=app.routes,
    )
    target = target or Path(__file__).resolve().parents[1] / "docs" / "openapi.json"
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(spec, indent=2))
    print(f"OpenAPI spec written to {target}")
    return target


if __name__ == "__main__":
    main(Path(sys.argv[1]) if len(sys.argv) > 1 else None)
