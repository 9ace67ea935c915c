"""
nexlayer.yaml 모델/생성/파싱/검증 모듈

사용 예시:
    from nexlayer_kit.manifest import build, render, parse, validate

    app = build("blog", [
        {"name": "web", "image": "nginx:1.25", "servicePorts": [80], "vars": {"MODE": "prod"}},
    ])
    text = render(app)

    result = validate(parse(text))
    if result.valid:
        print(f"Application: {result.manifest.name}")
"""

from .schema import Application, Pod, EnvVar, Secret, build
from .emitter import ManifestWriter, render, LAYOUT_NESTED, LAYOUT_SIBLING
from .parser import parse, parse_file
from .validator import ManifestValidator, ValidationResult, validate, image_has_tag

__all__ = [
    "Application",
    "Pod",
    "EnvVar",
    "Secret",
    "build",
    "ManifestWriter",
    "render",
    "LAYOUT_NESTED",
    "LAYOUT_SIBLING",
    "parse",
    "parse_file",
    "ManifestValidator",
    "ValidationResult",
    "validate",
    "image_has_tag",
]
