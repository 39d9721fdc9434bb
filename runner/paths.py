# runner/paths.py
import os

def output_dir() -> str:
    path = os.getenv("RUNNER_OUTPUT_DIR", ".")
    os.makedirs(path, exist_ok=True)
    return path

def artifact_path(filename: str, directory: str = None) -> str:
    return os.path.join(directory or output_dir(), filename)
