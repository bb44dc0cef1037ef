from __future__ import annotations

import argparse
import json
import mimetypes
from pathlib import Path

from bucket_connector.config import load_settings
from bucket_connector.connector import BucketConnector
from bucket_connector.errors import BucketConnectorError
from bucket_connector.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Bucket Manager (CLI)")
    parser.add_argument("--scope", default="bucket", help="Escopo de configuração (padrão: bucket)")
    parser.add_argument("--bucket", help="Bucket alvo (padrão: <escopo>.bucket_name)")
    parser.add_argument("--log-level", help="Nível de log (padrão: LOG_LEVEL ou INFO)")
    parser.add_argument("--env-file", type=Path, help="Arquivo .env a carregar (padrão: ./.env)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list-buckets", help="Lista os buckets visíveis para as credenciais")

    upload = sub.add_parser("upload", help="Faz upload de um arquivo local")
    upload.add_argument("path", help="Caminho do arquivo")
    upload.add_argument("--key", help="Chave de destino (padrão: nome do arquivo)")
    upload.add_argument("--content-type", help="Content-Type (padrão: inferido pela extensão)")

    delete_cmd = sub.add_parser("delete", help="Remove objetos do bucket")
    delete_group = delete_cmd.add_mutually_exclusive_group(required=True)
    delete_group.add_argument("--key", help="Chave completa do objeto a remover")
    delete_group.add_argument("--prefix", help="Prefixo dos objetos a remover")
    delete_group.add_argument("--all", action="store_true", help="Remove todos os objetos do bucket")

    sub.add_parser("check-connection", help="Testa a conexão listando os buckets")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Ponto de entrada da CLI do conector de bucket.

    Exemplos
    - Listar buckets: `python -m bucket_connector.cli.bucket_manager list-buckets`
    - Upload: `python -m bucket_connector.cli.bucket_manager upload docs/a.pdf --key docs/a.pdf`
    - Remover por prefixo: `python -m bucket_connector.cli.bucket_manager delete --prefix logs/`
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "delete" and args.key is not None and not args.key:
        parser.error("--key não pode ser vazio; use --all para remover todos os objetos")

    settings = load_settings(args.env_file)
    setup_logging(args.log_level)

    try:
        with BucketConnector(settings, args.scope) as connector:
            bucket = args.bucket or connector.bucket_name
            return _run(args, connector, bucket)
    except BucketConnectorError as exc:
        print(f"ERRO - {exc}")
        return 1


def _run(args: argparse.Namespace, connector: BucketConnector, bucket: str) -> int:
    if args.command == "list-buckets":
        buckets = [
            {"name": b.name, "creation_date": b.creation_date.isoformat() if b.creation_date else None}
            for b in connector.list_buckets()
        ]
        print(json.dumps(buckets, ensure_ascii=False, indent=2))
        return 0

    if args.command == "upload":
        path = Path(args.path)
        raw = path.read_bytes()
        key = args.key or path.name
        content_type = args.content_type or mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        print(connector.upload(bucket, key, raw, content_type))
        return 0

    if args.command == "delete":
        if args.key is not None:
            connector.delete_object(bucket, args.key)
            print(f"Removido: {args.key}")
            return 0
        if args.prefix is not None:
            removed = connector.delete_with_prefix(bucket, args.prefix)
            print(f"Removidos {removed} objetos com prefixo '{args.prefix}'")
            return 0
        if args.all:
            removed = connector.delete_with_prefix(bucket, "")
            print(f"Removidos {removed} objetos do bucket '{bucket}'")
            return 0
        return 1

    if args.command == "check-connection":
        names = [b.name for b in connector.list_buckets()]
        print(f"S3 OK - scope='{connector.scope}', bucket='{bucket}', buckets_visiveis={len(names)}")
        return 0

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
