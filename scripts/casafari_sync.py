"""
CLI: Casafari -> base local (one-way sync).

Uso recomendado:
  - Ejecutar como job (cron/systemd timer), una sola instancia a la vez.
  - No se integra al request/response del API para evitar timeouts.

Variables de entorno requeridas:
  - CASAFARI_API_KEY
  - CASAFARI_API_SECRET
  - DATABASE_URL (o DATABASE_HOST/PORT/USER/PASSWORD/NAME)

Ejecución:
  python scripts/casafari_sync.py
  python scripts/casafari_sync.py --country PT --city Lisboa --type apartment
  python scripts/casafari_sync.py --test
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

# Permite ejecutar este script desde cualquier cwd sin configurar PYTHONPATH.
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

# Cargar variables desde .env antes de importar settings.
load_dotenv(_PROJECT_ROOT / ".env", override=False)

from app.core.config import settings
from app.core.logging_config import setup_logging
from app.infrastructure.database.session import SessionLocal, init_db
from app.infrastructure.external.casafari_sync.errors import SyncConfigError
from app.infrastructure.external.casafari_sync.sync_service import build_client, build_from_settings
from app.infrastructure.external.casafari_sync.types import SyncStats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sincroniza propiedades de Casafari a la base local")
    parser.add_argument("--country", help="Filtrar por código de país (p.ej. PT, ES)")
    parser.add_argument("--city", help="Filtrar por ciudad")
    parser.add_argument("--type", dest="property_type", help="Filtrar por tipo de propiedad")
    parser.add_argument(
        "--test",
        action="store_true",
        help="Solo prueba la conexión con el API (no sincroniza).",
    )
    parser.add_argument("--log-file", help="Archivo de log (default: LOG_FILE)")
    return parser


def format_stats_table(stats: SyncStats) -> str:
    rows = [
        ("Total procesadas", stats.total),
        ("Creadas", stats.created),
        ("Actualizadas", stats.updated),
        ("Errores", stats.errors),
    ]
    width = max(len(label) for label, _ in rows)
    lines = [f"{'Métrica'.ljust(width)} | Cantidad", f"{'-' * width}-+---------"]
    lines += [f"{label.ljust(width)} | {count}" for label, count in rows]
    return "\n".join(lines)


def _test_connection() -> int:
    logger.info("Probando conexión con Casafari...")
    try:
        client = build_client()
    except SyncConfigError as e:
        logger.error(str(e))
        return 1

    if client.test_connection():
        logger.success("Conexión exitosa")
        return 0

    logger.error("Conexión fallida. Verifica las credenciales de Casafari.")
    return 1


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(settings, args.log_file)

    if args.test:
        return _test_connection()

    filters = {
        k: v
        for k, v in {"country": args.country, "city": args.city, "type": args.property_type}.items()
        if v
    }

    logger.info("Iniciando sync de propiedades Casafari...")
    if filters:
        logger.info(f"Aplicando filtros: {json.dumps(filters)}")

    init_db()
    with SessionLocal() as db:
        try:
            service = build_from_settings(db)
        except SyncConfigError as e:
            logger.error(str(e))
            return 1
        stats = service.sync_properties(filters)

    print()
    print(format_stats_table(stats))

    if stats.fetch_failed:
        logger.warning("El sync se cortó por un fallo del API; los datos pueden estar incompletos.")
    return 1 if stats.errors > 0 or stats.fetch_failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
