#!/usr/bin/env python3
"""
nexlayer-kit CLI

사용법:
    nexlayer-kit render app.json -o nexlayer.yaml
    nexlayer-kit validate nexlayer.yaml --remote
    nexlayer-kit deploy nexlayer.yaml
    nexlayer-kit reservation add blog
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from . import __version__
from .config import get_config
from .errors import InvalidSpec, ParseError, CollaboratorError
from .manifest import ManifestValidator, build, render, LAYOUT_NESTED, LAYOUT_SIBLING
from .platform import NexlayerClient
from .scaffold import (
    DOCKERFILE_TYPES,
    PROJECT_TYPES,
    analyze_project,
    generate_dockerfile,
    generate_project,
    write_files,
)


def _client(args) -> NexlayerClient:
    config = get_config()
    return NexlayerClient(
        base_url=args.base_url or config.base_url,
        session_token=args.session_token or config.session_token,
        timeout=config.timeout,
    )


async def _with_client(args, call):
    async with _client(args) as client:
        return await call(client)


def _print_findings(title: str, findings):
    if findings:
        print(f"\n{title}:")
        for item in findings:
            print(f"  - {item}")


def _print_deployment(result, as_json: bool):
    if as_json:
        print(json.dumps(result.model_dump(by_alias=True, mode="json"), indent=2, ensure_ascii=False))
        return
    print(f"[OK] {result.application_name}: {result.status.value}")
    print(f"  URL: {result.url or 'Will be available shortly'}")
    print(f"  Session Token: {result.session_token}")


# =============================================================================
# Manifest
# =============================================================================

def cmd_render(args):
    """JSON 정의에서 nexlayer.yaml 생성"""
    definition = json.loads(Path(args.definition_file).read_text(encoding="utf-8"))
    if not isinstance(definition, dict):
        raise InvalidSpec("Definition must be a JSON object")
    application = definition.get("application", definition)
    if not isinstance(application, dict):
        raise InvalidSpec("application must be an object", "application")

    app = build(application.get("name"), application.get("pods") or [])
    text = render(app, layout=args.layout)

    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
        print(f"[OK] {args.output} 생성 ({len(app.pods)} pods)")
    else:
        sys.stdout.write(text)

    _print_findings("경고", ManifestValidator().validate(app).warnings)
    return 0


def cmd_validate(args):
    """nexlayer.yaml 검증"""
    result = ManifestValidator().validate_file(args.file)
    remote = None

    if result.valid and args.remote:
        yaml_content = Path(args.file).read_text(encoding="utf-8")
        remote = asyncio.run(_with_client(args, lambda c: c.validate_yaml(yaml_content)))

    if args.json:
        output = {"local": result.to_dict()}
        if remote is not None:
            output["remote"] = remote.model_dump()
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        print(f"유효성: {'OK' if result.valid else 'FAIL'}")
        _print_findings("오류", result.errors)
        _print_findings("경고", result.warnings)
        if remote is not None:
            print(f"\n플랫폼 검증: {'OK' if remote.valid else 'FAIL'}")
            _print_findings("오류", remote.errors)
            _print_findings("경고", remote.warnings)

    if not result.valid:
        return 1
    if remote is not None and not remote.valid:
        return 1
    return 0


# =============================================================================
# Platform
# =============================================================================

def cmd_deploy(args):
    """nexlayer.yaml 배포 (로컬 검증 후)"""
    validation = ManifestValidator().validate_file(args.file)
    if not validation.valid:
        print(f"[FAIL] {args.file} 검증 실패")
        _print_findings("오류", validation.errors)
        return 1

    yaml_content = Path(args.file).read_text(encoding="utf-8")
    result = asyncio.run(_with_client(args, lambda c: c.start_user_deployment(yaml_content)))
    _print_deployment(result, args.json)
    return 0


def cmd_extend(args):
    """배포 연장"""
    result = asyncio.run(_with_client(args, lambda c: c.extend_deployment(args.application_name)))
    _print_deployment(result, args.json)
    return 0


def cmd_claim(args):
    """배포 클레임"""
    result = asyncio.run(_with_client(args, lambda c: c.claim_deployment(args.application_name)))
    _print_deployment(result, args.json)
    return 0


def cmd_reservation(args):
    """예약 추가/제거"""
    if args.action == "add":
        asyncio.run(_with_client(args, lambda c: c.add_deployment_reservation(args.application_name)))
        print(f"[OK] {args.application_name} 예약 추가")
    elif args.application_name:
        asyncio.run(_with_client(args, lambda c: c.remove_deployment_reservation(args.application_name)))
        print(f"[OK] {args.application_name} 예약 제거")
    else:
        asyncio.run(_with_client(args, lambda c: c.remove_all_reservations()))
        print("[OK] 모든 예약 제거")
    return 0


def cmd_reservations(args):
    """예약 목록"""
    reservations = asyncio.run(_with_client(args, lambda c: c.get_reservations()))

    if args.json:
        print(json.dumps([r.model_dump(by_alias=True) for r in reservations], indent=2, ensure_ascii=False))
    elif not reservations:
        print("예약 없음")
    else:
        for r in reservations:
            print(f"  - {r.application_name} (created {r.created_at}, expires {r.expires_at})")
    return 0


def cmd_schema(args):
    """스키마 조회"""
    schema = asyncio.run(_with_client(args, lambda c: c.get_schema()))
    print(json.dumps(schema.model_dump(by_alias=True), indent=2, ensure_ascii=False))
    return 0


# =============================================================================
# Scaffold
# =============================================================================

def cmd_dockerfile(args):
    """Dockerfile 생성"""
    dockerfile = generate_dockerfile(
        name=args.name,
        app_type=args.type,
        port=args.port,
        base_image=args.base_image,
        build_command=args.build_command,
        start_command=args.start_command,
    )
    if args.output:
        Path(args.output).write_text(dockerfile, encoding="utf-8")
        print(f"[OK] {args.output} 생성")
    else:
        sys.stdout.write(dockerfile)
    return 0


def cmd_scaffold(args):
    """프로젝트 파일 생성"""
    config = get_config()
    result = generate_project(args.type, args.name, registry=config.registry, tag=config.image_tag)
    target_dir = Path(args.output_dir) / args.name
    write_files(str(target_dir), result.files)

    print(f"[OK] {target_dir} 에 {len(result.files)}개 파일 생성")
    for path in result.paths:
        print(f"  - {path}")
    print("\n다음 단계:")
    for i, step in enumerate(result.instructions, 1):
        print(f"  {i}. {step}")
    return 0


def cmd_analyze(args):
    """프로젝트 분석"""
    if not Path(args.path).is_dir():
        print(f"[FAIL] 디렉토리가 아닙니다: {args.path}")
        return 1

    analysis = analyze_project(args.path)
    if args.json:
        print(json.dumps({"type": analysis.type, "port": analysis.port, "framework": analysis.framework}, indent=2))
    else:
        print(f"Type: {analysis.type}")
        print(f"Port: {analysis.port}")
        print(f"Framework: {analysis.framework}")
    return 0


COMMANDS = {
    "render": cmd_render,
    "validate": cmd_validate,
    "deploy": cmd_deploy,
    "extend": cmd_extend,
    "claim": cmd_claim,
    "reservation": cmd_reservation,
    "reservations": cmd_reservations,
    "schema": cmd_schema,
    "dockerfile": cmd_dockerfile,
    "scaffold": cmd_scaffold,
    "analyze": cmd_analyze,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nexlayer-kit",
        description="nexlayer-kit - nexlayer.yaml 생성/검증 및 Nexlayer 배포 도구",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
예제:
  # JSON 정의에서 nexlayer.yaml 생성
  nexlayer-kit render app.json -o nexlayer.yaml

  # 로컬 + 플랫폼 검증
  nexlayer-kit validate nexlayer.yaml --remote

  # 배포 후 예약
  nexlayer-kit deploy nexlayer.yaml
  nexlayer-kit reservation add blog
        """
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="DEBUG 로그 출력")
    parser.add_argument("--base-url", default=None, help="플랫폼 API 주소 (기본: NEXLAYER_BASE_URL)")
    parser.add_argument("--session-token", default=None, help="세션 토큰 (기본: NEXLAYER_SESSION_TOKEN)")

    subparsers = parser.add_subparsers(dest="command", help="명령어")

    # render 명령어
    render_parser = subparsers.add_parser("render", help="JSON 정의에서 nexlayer.yaml 생성")
    render_parser.add_argument("definition_file", help="애플리케이션 정의 JSON 파일")
    render_parser.add_argument("-o", "--output", help="출력 파일 (기본: stdout)")
    render_parser.add_argument("--layout", choices=[LAYOUT_NESTED, LAYOUT_SIBLING], default=LAYOUT_NESTED)

    # validate 명령어
    validate_parser = subparsers.add_parser("validate", help="nexlayer.yaml 검증")
    validate_parser.add_argument("file", help="nexlayer.yaml 경로")
    validate_parser.add_argument("--remote", action="store_true", help="플랫폼 검증도 수행")
    validate_parser.add_argument("--json", action="store_true", help="JSON 형식으로 출력")

    # deploy 명령어
    deploy_parser = subparsers.add_parser("deploy", help="nexlayer.yaml 배포")
    deploy_parser.add_argument("file", help="nexlayer.yaml 경로")
    deploy_parser.add_argument("--json", action="store_true", help="JSON 형식으로 출력")

    # extend / claim 명령어
    for name, help_text in (("extend", "배포 연장"), ("claim", "배포 클레임")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("application_name", help="애플리케이션 이름")
        sub.add_argument("--json", action="store_true", help="JSON 형식으로 출력")

    # reservation 명령어
    reservation_parser = subparsers.add_parser("reservation", help="예약 추가/제거")
    reservation_parser.add_argument("action", choices=["add", "remove"])
    reservation_parser.add_argument(
        "application_name", nargs="?",
        help="애플리케이션 이름 (remove에서 생략하면 전체 제거)",
    )

    # reservations 명령어
    reservations_parser = subparsers.add_parser("reservations", help="예약 목록")
    reservations_parser.add_argument("--json", action="store_true", help="JSON 형식으로 출력")

    # schema 명령어
    subparsers.add_parser("schema", help="nexlayer.yaml 스키마 조회")

    # dockerfile 명령어
    dockerfile_parser = subparsers.add_parser("dockerfile", help="Dockerfile 생성")
    dockerfile_parser.add_argument("type", choices=sorted(DOCKERFILE_TYPES))
    dockerfile_parser.add_argument("--name", default="app", help="애플리케이션 이름")
    dockerfile_parser.add_argument("--port", type=int, default=3000)
    dockerfile_parser.add_argument("--base-image", default=None)
    dockerfile_parser.add_argument("--build-command", default=None)
    dockerfile_parser.add_argument("--start-command", default=None)
    dockerfile_parser.add_argument("-o", "--output", help="출력 파일 (기본: stdout)")

    # scaffold 명령어
    scaffold_parser = subparsers.add_parser("scaffold", help="프로젝트 파일 생성")
    scaffold_parser.add_argument("type", choices=list(PROJECT_TYPES))
    scaffold_parser.add_argument("name", help="프로젝트 이름")
    scaffold_parser.add_argument("--output-dir", default=".", help="상위 디렉토리")

    # analyze 명령어
    analyze_parser = subparsers.add_parser("analyze", help="로컬 프로젝트 분석")
    analyze_parser.add_argument("path", nargs="?", default=".")
    analyze_parser.add_argument("--json", action="store_true", help="JSON 형식으로 출력")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    level = "DEBUG" if args.verbose else get_config().log_level
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return 0

    if args.command == "reservation" and args.action == "add" and not args.application_name:
        parser.error("reservation add requires an application name")

    try:
        return command(args)
    except (InvalidSpec, ParseError, CollaboratorError, ValueError, OSError) as e:
        print(f"[FAIL] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
