"""
Dockerfile 템플릿

프레임워크별 기본 Dockerfile을 생성합니다.
"""

from typing import Optional, List, Callable, Dict

from ..errors import InvalidSpec

DOCKERFILE_TYPES = (
    "node", "react", "next", "nextjs", "vue", "angular",
    "python", "go", "rust", "php", "java", "dotnet",
)


def generate_dockerfile(
    name: str,
    app_type: str,
    port: int = 3000,
    base_image: Optional[str] = None,
    build_command: Optional[str] = None,
    start_command: Optional[str] = None,
    dependencies: Optional[List[str]] = None,
    custom_dockerfile: Optional[str] = None,
) -> str:
    """
    Dockerfile 생성

    Args:
        name: 애플리케이션 이름 (바이너리/아티팩트 이름에 사용)
        app_type: node, react, next, vue, angular, python, go, rust, php, java, dotnet
        port: EXPOSE 포트
        base_image: 기본 이미지 오버라이드 (python, go, rust, php, java, dotnet)
        build_command: 빌드 명령 (node)
        start_command: 시작 명령 (node)
        dependencies: 추가 패키지 (node, python)
        custom_dockerfile: 지정하면 그대로 반환

    Raises:
        InvalidSpec: 지원하지 않는 타입
    """
    if custom_dockerfile:
        return custom_dockerfile

    if app_type == "nextjs":
        app_type = "next"
    generator = _GENERATORS.get(app_type)
    if generator is None:
        raise InvalidSpec(
            f"Unsupported application type: {app_type}. Valid values: {list(DOCKERFILE_TYPES)}",
            "type",
        )
    return generator(
        name=name,
        port=port,
        base_image=base_image,
        build_command=build_command,
        start_command=start_command,
        dependencies=dependencies,
    )


def generate_nginx_config(port: int = 3000) -> str:
    """SPA 프론트엔드용 nginx 설정"""
    return f"""server {{
    listen {port};
    server_name localhost;

    location / {{
        root /usr/share/nginx/html;
        index index.html index.htm;
        try_files $uri $uri/ /index.html;
    }}
}}
"""


def _node(name, port, build_command=None, start_command=None, dependencies=None, **_) -> str:
    install = "RUN npm install"
    if dependencies:
        install += f" && npm install {' '.join(dependencies)}"
    build = f"RUN {build_command}\n\n" if build_command else ""
    command = ", ".join(f'"{part}"' for part in (start_command or "npm start").split())
    return f"""FROM node:18-alpine

WORKDIR /app

COPY package*.json ./

{install}

COPY . .

{build}EXPOSE {port}

CMD [{command}]
"""


def _spa(build_dir: str, copy_nginx_config: bool) -> Callable[..., str]:
    """빌드 결과를 nginx로 서빙하는 멀티 스테이지 Dockerfile"""

    def generator(name, port, **_) -> str:
        nginx_config = ""
        if copy_nginx_config:
            nginx_config = "COPY nginx.conf /etc/nginx/conf.d/default.conf\n\n"
        return f"""FROM node:18-alpine as build

WORKDIR /app

COPY package*.json ./

RUN npm install

COPY . .

RUN npm run build

FROM nginx:alpine

COPY --from=build /app/{build_dir} /usr/share/nginx/html

{nginx_config}EXPOSE {port}

CMD ["nginx", "-g", "daemon off;"]
"""

    return generator


def _next(name, port, **_) -> str:
    return f"""FROM node:18-alpine

WORKDIR /app

COPY package*.json ./

RUN npm install

COPY . .

RUN npm run build

EXPOSE {port}

CMD ["npm", "start"]
"""


def _python(name, port, base_image=None, dependencies=None, **_) -> str:
    install = (
        f"RUN pip install --no-cache-dir {' '.join(dependencies)}"
        if dependencies
        else "RUN pip install --no-cache-dir -r requirements.txt"
    )
    return f"""FROM {base_image or 'python:3.11-slim'}

WORKDIR /app

COPY requirements.txt .

{install}

COPY . .

EXPOSE {port}

CMD ["python", "app.py"]
"""


def _go(name, port, base_image=None, **_) -> str:
    return f"""FROM {base_image or 'golang:1.21-alpine'} as builder

WORKDIR /app

COPY go.mod go.sum* ./

RUN go mod download

COPY . .

RUN go build -o main .

FROM alpine:latest

WORKDIR /app

COPY --from=builder /app/main .

EXPOSE {port}

CMD ["./main"]
"""


def _rust(name, port, base_image=None, **_) -> str:
    return f"""FROM {base_image or 'rust:1.75-alpine'} as builder

WORKDIR /app

COPY . .

RUN cargo build --release

FROM alpine:latest

WORKDIR /app

COPY --from=builder /app/target/release/{name} .

EXPOSE {port}

CMD ["./{name}"]
"""


def _php(name, port, base_image=None, **_) -> str:
    return f"""FROM {base_image or 'php:8.2-apache'}

WORKDIR /var/www/html

COPY . .

EXPOSE {port}

CMD ["apache2-foreground"]
"""


def _java(name, port, base_image=None, **_) -> str:
    return f"""FROM {base_image or 'eclipse-temurin:17-jre-alpine'}

WORKDIR /app

COPY target/{name}.jar app.jar

EXPOSE {port}

CMD ["java", "-jar", "app.jar"]
"""


def _dotnet(name, port, base_image=None, **_) -> str:
    return f"""FROM {base_image or 'mcr.microsoft.com/dotnet/aspnet:7.0'}

WORKDIR /app

COPY bin/Release/net7.0/publish .

EXPOSE {port}

CMD ["dotnet", "{name}.dll"]
"""


_GENERATORS: Dict[str, Callable[..., str]] = {
    "node": _node,
    "react": _spa("build", copy_nginx_config=True),
    "next": _next,
    "vue": _spa("dist", copy_nginx_config=False),
    "angular": _spa("dist", copy_nginx_config=False),
    "python": _python,
    "go": _go,
    "rust": _rust,
    "php": _php,
    "java": _java,
    "dotnet": _dotnet,
}
