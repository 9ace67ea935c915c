"""
프로젝트 파일 템플릿

프론트엔드/백엔드/데이터베이스 초기 파일 내용을 생성합니다.
"""

import json
from typing import Dict, Any


def _package_json(data: Dict[str, Any]) -> str:
    return json.dumps(data, indent=2) + "\n"


# =============================================================================
# Frontend
# =============================================================================

def react_package_json(app_name: str) -> str:
    return _package_json({
        "name": app_name,
        "version": "0.1.0",
        "private": True,
        "dependencies": {
            "react": "^18.2.0",
            "react-dom": "^18.2.0",
            "react-scripts": "5.0.1",
        },
        "scripts": {
            "start": "react-scripts start",
            "build": "react-scripts build",
            "test": "react-scripts test",
        },
        "browserslist": {
            "production": [">0.2%", "not dead", "not op_mini all"],
            "development": ["last 1 chrome version", "last 1 firefox version"],
        },
    })


def react_app_js(app_name: str) -> str:
    return f"""import React from 'react';

function App() {{
  return (
    <div className="App">
      <header className="App-header">
        <h1>Hello World from {app_name}!</h1>
        <p>Welcome to your React app deployed on Nexlayer</p>
      </header>
    </div>
  );
}}

export default App;
"""


def react_index_js() -> str:
    return """import React from 'react';
import ReactDOM from 'react-dom/client';
import App from './App';

const root = ReactDOM.createRoot(document.getElementById('root'));
root.render(<App />);
"""


def react_index_html(app_name: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>{app_name}</title>
  </head>
  <body>
    <noscript>You need to enable JavaScript to run this app.</noscript>
    <div id="root"></div>
  </body>
</html>
"""


def vue_package_json(app_name: str) -> str:
    return _package_json({
        "name": app_name,
        "version": "0.1.0",
        "private": True,
        "scripts": {
            "serve": "vue-cli-service serve",
            "build": "vue-cli-service build",
        },
        "dependencies": {"vue": "^3.3.0"},
        "devDependencies": {"@vue/cli-service": "^5.0.0"},
    })


def vue_app(app_name: str) -> str:
    return f"""<template>
  <div id="app">
    <h1>Hello World from {app_name}!</h1>
    <p>Welcome to your Vue app deployed on Nexlayer</p>
  </div>
</template>

<script>
export default {{
  name: 'App'
}}
</script>
"""


def next_package_json(app_name: str) -> str:
    return _package_json({
        "name": app_name,
        "version": "0.1.0",
        "private": True,
        "scripts": {
            "dev": "next dev",
            "build": "next build",
            "start": "next start",
            "lint": "next lint",
        },
        "dependencies": {
            "next": "14.0.0",
            "react": "^18.2.0",
            "react-dom": "^18.2.0",
        },
        "devDependencies": {
            "@types/node": "^20.0.0",
            "@types/react": "^18.2.0",
            "@types/react-dom": "^18.2.0",
            "typescript": "^5.0.0",
        },
    })


def next_page(app_name: str) -> str:
    return f"""'use client';

import {{ useState }} from 'react';

export default function Home() {{
  const [message] = useState('Hello from {app_name}!');

  return (
    <main className="min-h-screen flex flex-col items-center justify-center p-24">
      <h1 className="text-4xl font-bold mb-4">{{message}}</h1>
      <p className="text-xl">Welcome to your Next.js app on Nexlayer!</p>
    </main>
  );
}}
"""


# =============================================================================
# Backend
# =============================================================================

def node_package_json(app_name: str) -> str:
    return _package_json({
        "name": f"{app_name}-backend",
        "version": "0.1.0",
        "main": "index.js",
        "scripts": {"start": "node index.js"},
        "dependencies": {"express": "^4.18.2", "cors": "^2.8.5"},
    })


def node_index_js(app_name: str, port: int) -> str:
    return f"""const express = require('express');
const cors = require('cors');

const app = express();
const port = process.env.PORT || {port};

app.use(cors());
app.use(express.json());

app.get('/api/health', (req, res) => {{
  res.json({{ status: 'healthy', service: '{app_name}-backend' }});
}});

app.get('/api/hello', (req, res) => {{
  res.json({{ message: 'Hello from {app_name}!' }});
}});

app.listen(port, () => {{
  console.log(`{app_name} backend listening on port ${{port}}`);
}});
"""


def python_requirements() -> str:
    return "flask==3.0.0\nflask-cors==4.0.0\n"


def python_app_py(app_name: str, port: int) -> str:
    return f"""import os

from flask import Flask, jsonify
from flask_cors import CORS

app = Flask(__name__)
CORS(app)


@app.route("/api/health")
def health():
    return jsonify(status="healthy", service="{app_name}-backend")


@app.route("/api/hello")
def hello():
    return jsonify(message="Hello from {app_name}!")


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", {port})))
"""


def go_mod(app_name: str) -> str:
    return f"""module {app_name}-backend

go 1.21
"""


def go_main(app_name: str, port: int) -> str:
    return f"""package main

import (
	"encoding/json"
	"log"
	"net/http"
	"os"
)

func main() {{
	port := os.Getenv("PORT")
	if port == "" {{
		port = "{port}"
	}}

	http.HandleFunc("/api/health", func(w http.ResponseWriter, r *http.Request) {{
		w.Header().Set("Content-Type", "application/json")
		json.NewEncoder(w).Encode(map[string]string{{"status": "healthy", "service": "{app_name}-backend"}})
	}})

	log.Printf("{app_name} backend listening on port %s", port)
	log.Fatal(http.ListenAndServe(":"+port, nil))
}}
"""


def rust_cargo_toml(app_name: str) -> str:
    return f"""[package]
name = "{app_name}"
version = "0.1.0"
edition = "2021"

[dependencies]
"""


def rust_main(app_name: str, port: int) -> str:
    return f"""use std::io::{{Read, Write}};
use std::net::TcpListener;

fn main() {{
    let listener = TcpListener::bind("0.0.0.0:{port}").expect("bind");
    println!("{app_name} backend listening on port {port}");
    for stream in listener.incoming() {{
        let mut stream = stream.expect("connection");
        let mut buffer = [0; 1024];
        let _ = stream.read(&mut buffer);
        let body = "{{\\"status\\":\\"healthy\\"}}";
        let response = format!(
            "HTTP/1.1 200 OK\\r\\nContent-Type: application/json\\r\\nContent-Length: {{}}\\r\\n\\r\\n{{}}",
            body.len(),
            body
        );
        let _ = stream.write_all(response.as_bytes());
    }}
}}
"""


# =============================================================================
# Database
# =============================================================================

def postgres_init_sql(app_name: str) -> str:
    return f"""-- {app_name} database initialization
CREATE TABLE IF NOT EXISTS users (
    id SERIAL PRIMARY KEY,
    email VARCHAR(255) UNIQUE NOT NULL,
    name VARCHAR(255),
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""


def mysql_init_sql(app_name: str) -> str:
    return f"""-- {app_name} database initialization
CREATE TABLE IF NOT EXISTS users (
    id INT AUTO_INCREMENT PRIMARY KEY,
    email VARCHAR(255) UNIQUE NOT NULL,
    name VARCHAR(255),
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""


def mongo_init_js(app_name: str) -> str:
    return f"""// {app_name} database initialization
db = db.getSiblingDB('{app_name}');
db.createCollection('users');
db.users.createIndex({{ email: 1 }}, {{ unique: true }});
"""


def openai_config_js(app_name: str) -> str:
    return f"""// {app_name} OpenAI integration
const OpenAI = require('openai');

const openai = new OpenAI({{
  apiKey: process.env.OPENAI_API_KEY,
}});

module.exports = openai;
"""
