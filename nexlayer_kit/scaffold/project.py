"""
프로젝트 스캐폴딩

단일 앱/풀스택 프로젝트 파일과 nexlayer.yaml을 생성하고,
로컬 디렉토리의 프로젝트 종류를 추정합니다.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, Dict, Any

from ..errors import InvalidSpec
from ..manifest import build, render
from . import templates
from .dockerfile import generate_dockerfile, generate_nginx_config

logger = logging.getLogger(__name__)

FRONTEND_TYPES = ("react", "vue", "next", "nextjs")
BACKEND_TYPES = ("node", "python", "go", "rust")
PROJECT_TYPES = ("react", "next", "vue", "node", "python", "fullstack")


@dataclass
class DatabaseImage:
    """데이터베이스 파드 기본값"""
    image: str
    port: int
    init_file: str
    env: Dict[str, str] = field(default_factory=dict)


DATABASES: Dict[str, DatabaseImage] = {
    "postgres": DatabaseImage(
        image="postgres:16-alpine",
        port=5432,
        init_file="init.sql",
        env={"POSTGRES_USER": "{name}", "POSTGRES_PASSWORD": "change-me", "POSTGRES_DB": "{name}"},
    ),
    "mysql": DatabaseImage(
        image="mysql:8.0",
        port=3306,
        init_file="init.sql",
        env={"MYSQL_USER": "{name}", "MYSQL_PASSWORD": "change-me",
             "MYSQL_ROOT_PASSWORD": "change-me", "MYSQL_DATABASE": "{name}"},
    ),
    "mongodb": DatabaseImage(
        image="mongo:7.0",
        port=27017,
        init_file="init.js",
        env={"MONGO_INITDB_DATABASE": "{name}"},
    ),
}


@dataclass
class GeneratedFile:
    """생성된 파일"""
    name: str
    path: str
    content: str


@dataclass
class FileGenerationResult:
    """파일 생성 결과"""
    files: List[GeneratedFile] = field(default_factory=list)
    instructions: List[str] = field(default_factory=list)
    manifest: str = ""

    def add(self, path: str, content: str) -> None:
        self.files.append(GeneratedFile(name=Path(path).name, path=path, content=content))

    @property
    def paths(self) -> List[str]:
        return [f.path for f in self.files]


@dataclass
class ProjectAnalysis:
    """로컬 프로젝트 분석 결과"""
    type: str
    port: int
    framework: str


def pod_address(pod_name: str, port: int) -> str:
    """파드 간 통신 주소 (<pod>.pod:<port>)"""
    return f"{pod_name}.pod:{port}"


# =============================================================================
# 풀스택
# =============================================================================

def generate_full_stack(
    app_name: str,
    frontend_type: Optional[str] = "react",
    frontend_port: int = 3000,
    backend_type: Optional[str] = "node",
    backend_port: int = 8000,
    database_type: Optional[str] = None,
    openai_enabled: bool = False,
    openai_api_key: Optional[str] = None,
    registry: str = "ttl.sh",
    tag: str = "1h",
) -> FileGenerationResult:
    """
    풀스택 프로젝트 생성

    frontend/, backend/, database/ 하위 파일과 파드별 Dockerfile,
    그리고 모든 파드를 담은 nexlayer.yaml을 생성합니다.

    Raises:
        InvalidSpec: 지원하지 않는 타입이거나 매니페스트 규칙 위반
    """
    if frontend_type == "nextjs":
        frontend_type = "next"
    if frontend_type and frontend_type not in FRONTEND_TYPES:
        raise InvalidSpec(f"Unsupported frontend type: {frontend_type}", "frontend.type")
    if backend_type and backend_type not in BACKEND_TYPES:
        raise InvalidSpec(f"Unsupported backend type: {backend_type}", "backend.type")
    if database_type and database_type not in DATABASES:
        raise InvalidSpec(f"Unsupported database type: {database_type}", "database.type")
    if not frontend_type and not backend_type:
        raise InvalidSpec("A frontend or a backend is required")

    result = FileGenerationResult()
    pods: List[Dict[str, Any]] = []

    frontend_pod = f"{app_name}-frontend"
    backend_pod = f"{app_name}-backend"
    database_pod = f"{app_name}-db"

    if database_type:
        db = DATABASES[database_type]
        result.add(f"database/{db.init_file}", _database_init(database_type, app_name))
        pods.append({
            "name": database_pod,
            "image": db.image,
            "servicePorts": [db.port],
            "vars": {key: value.format(name=app_name) for key, value in db.env.items()},
        })
        result.instructions.append(f"Database ({database_type}) configuration generated")

    if backend_type:
        _add_backend_files(result, app_name, backend_type, backend_port)
        result.add("backend/Dockerfile", generate_dockerfile(
            name=app_name,
            app_type=backend_type,
            port=backend_port,
            dependencies=["flask", "flask-cors"] if backend_type == "python" else None,
        ))
        backend_vars = {"PORT": str(backend_port)}
        if database_type:
            backend_vars["DATABASE_URL"] = _database_url(database_type, database_pod, app_name)
        if openai_enabled:
            result.add("backend/openai.js", templates.openai_config_js(app_name))
            backend_vars["OPENAI_API_KEY"] = openai_api_key or "your-api-key-here"
            result.instructions.append("OpenAI integration configured")
        pods.append({
            "name": backend_pod,
            "image": f"{registry}/{backend_pod}:{tag}",
            "servicePorts": [backend_port],
            "vars": backend_vars,
        })
        result.instructions.append(f"Backend ({backend_type}) files generated in /backend directory")

    if frontend_type:
        _add_frontend_files(result, app_name, frontend_type, "frontend/")
        result.add("frontend/Dockerfile", generate_dockerfile(
            name=app_name, app_type=frontend_type, port=frontend_port,
        ))
        if frontend_type == "react":
            result.add("frontend/nginx.conf", generate_nginx_config(frontend_port))
        frontend_spec: Dict[str, Any] = {
            "name": frontend_pod,
            "image": f"{registry}/{frontend_pod}:{tag}",
            "servicePorts": [frontend_port],
        }
        if backend_type:
            frontend_spec["vars"] = {"API_URL": f"http://{pod_address(backend_pod, backend_port)}"}
        pods.append(frontend_spec)
        result.instructions.append(f"Frontend ({frontend_type}) files generated in /frontend directory")

    result.manifest = render(build(app_name, pods))
    result.add("nexlayer.yaml", result.manifest)
    result.instructions.append("nexlayer.yaml generated for deployment")

    logger.info(f"Full-stack project generated: {app_name} ({len(result.files)} files)")
    return result


def _add_frontend_files(result: FileGenerationResult, app_name: str, frontend_type: str, prefix: str = ""):
    if frontend_type == "react":
        result.add(f"{prefix}package.json", templates.react_package_json(app_name))
        result.add(f"{prefix}src/App.js", templates.react_app_js(app_name))
        result.add(f"{prefix}src/index.js", templates.react_index_js())
        result.add(f"{prefix}public/index.html", templates.react_index_html(app_name))
    elif frontend_type == "vue":
        result.add(f"{prefix}package.json", templates.vue_package_json(app_name))
        result.add(f"{prefix}src/App.vue", templates.vue_app(app_name))
    elif frontend_type == "next":
        result.add(f"{prefix}package.json", templates.next_package_json(app_name))
        result.add(f"{prefix}app/page.tsx", templates.next_page(app_name))


def _add_backend_files(result: FileGenerationResult, app_name: str, backend_type: str, port: int, prefix: str = "backend/"):
    if backend_type == "node":
        result.add(f"{prefix}package.json", templates.node_package_json(app_name))
        result.add(f"{prefix}index.js", templates.node_index_js(app_name, port))
    elif backend_type == "python":
        result.add(f"{prefix}requirements.txt", templates.python_requirements())
        result.add(f"{prefix}app.py", templates.python_app_py(app_name, port))
    elif backend_type == "go":
        result.add(f"{prefix}go.mod", templates.go_mod(app_name))
        result.add(f"{prefix}main.go", templates.go_main(app_name, port))
    elif backend_type == "rust":
        result.add(f"{prefix}Cargo.toml", templates.rust_cargo_toml(app_name))
        result.add(f"{prefix}src/main.rs", templates.rust_main(app_name, port))


def _database_init(database_type: str, app_name: str) -> str:
    if database_type == "postgres":
        return templates.postgres_init_sql(app_name)
    if database_type == "mysql":
        return templates.mysql_init_sql(app_name)
    return templates.mongo_init_js(app_name)


def _database_url(database_type: str, pod_name: str, app_name: str) -> str:
    address = pod_address(pod_name, DATABASES[database_type].port)
    if database_type == "postgres":
        return f"postgresql://{app_name}:change-me@{address}/{app_name}"
    if database_type == "mysql":
        return f"mysql://{app_name}:change-me@{address}/{app_name}"
    return f"mongodb://{address}/{app_name}"


# =============================================================================
# 단일 프로젝트
# =============================================================================

def generate_project(
    project_type: str,
    project_name: str,
    registry: str = "ttl.sh",
    tag: str = "1h",
) -> FileGenerationResult:
    """
    단일 앱 프로젝트 생성 (fullstack이면 react + node)

    Raises:
        InvalidSpec: 지원하지 않는 프로젝트 타입
    """
    if project_type == "fullstack":
        return generate_full_stack(project_name, registry=registry, tag=tag)
    if project_type not in PROJECT_TYPES:
        raise InvalidSpec(
            f"Unsupported project type: {project_type}. Valid values: {list(PROJECT_TYPES)}",
            "projectType",
        )

    port = 8000 if project_type == "python" else 3000
    result = FileGenerationResult()

    if project_type in FRONTEND_TYPES:
        _add_frontend_files(result, project_name, project_type)
    else:
        _add_backend_files(result, project_name, project_type, port, prefix="")

    result.add("Dockerfile", generate_dockerfile(
        name=project_name,
        app_type=project_type,
        port=port,
        dependencies=["flask", "flask-cors"] if project_type == "python" else None,
    ))
    if project_type == "react":
        result.add("nginx.conf", generate_nginx_config(port))

    image = f"{registry}/{project_name}:{tag}"
    result.manifest = render(build(project_name, [
        {"name": project_name, "image": image, "servicePorts": [port]},
    ]))
    result.add("nexlayer.yaml", result.manifest)

    result.instructions.extend([
        f"cd {project_name}",
        f"docker build -t {image} .",
        f"docker push {image}",
        "Deploy nexlayer.yaml with the deploy-local-yaml tool",
    ])
    return result


def write_files(target_dir: str, files: List[GeneratedFile]) -> List[Path]:
    """생성된 파일을 디스크에 기록 (상위 디렉토리 자동 생성)"""
    root = Path(target_dir)
    written = []
    for generated in files:
        path = root / generated.path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(generated.content, encoding="utf-8")
        written.append(path)
    logger.info(f"Wrote {len(written)} files to {root}")
    return written


# =============================================================================
# 프로젝트 분석
# =============================================================================

def analyze_project(project_path: str) -> ProjectAnalysis:
    """
    로컬 디렉토리의 프로젝트 종류 추정

    package.json 의존성을 먼저 보고, 없으면 .py / .go 파일 유무로 판단합니다.
    판단할 수 없으면 node로 간주합니다.
    """
    root = Path(project_path)
    package_json = root / "package.json"

    if package_json.is_file():
        try:
            package = json.loads(package_json.read_text(encoding="utf-8"))
        except ValueError as e:
            logger.warning(f"Could not read {package_json}: {e}")
            package = {}
        return _analyze_package(package)

    if any(root.glob("*.py")):
        return ProjectAnalysis(type="python", port=8000, framework="Python")
    if any(root.glob("*.go")):
        return ProjectAnalysis(type="go", port=8080, framework="Go")

    return ProjectAnalysis(type="node", port=3000, framework="Node.js")


def _analyze_package(package: Dict[str, Any]) -> ProjectAnalysis:
    dependencies = {
        **(package.get("dependencies") or {}),
        **(package.get("devDependencies") or {}),
    }

    if "react" in dependencies and "react-scripts" in dependencies:
        return ProjectAnalysis(type="react", port=3000, framework="React")
    if "next" in dependencies:
        return ProjectAnalysis(type="next", port=3000, framework="Next.js")
    if "vue" in dependencies and "@vue/cli-service" in dependencies:
        return ProjectAnalysis(type="vue", port=3000, framework="Vue.js")
    return ProjectAnalysis(type="node", port=3000, framework="Node.js")
