"""
Pipeline de sincronización one-way: Casafari API -> base de datos local.

Este paquete está diseñado para ejecutarse como job (cron / CLI) o desde el
endpoint de sync en un thread aparte, no dentro del event loop.

Objetivos de diseño:
- Idempotencia: UPSERT por casafari_id, se puede ejecutar N veces sin duplicar.
- Aislamiento de fallos: un registro malo no aborta la corrida.
- Payload original intacto en raw_data para poder re-mapear sin otro fetch.
"""
