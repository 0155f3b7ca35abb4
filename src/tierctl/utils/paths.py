from pathlib import Path


def get_project_root() -> Path:
    """Get the project root directory.

    Walks up from the module location (and then the working directory) to
    find the project root, identified by the presence of pyproject.toml or
    config.yaml.

    Returns:
        Path to the project root directory
    """
    markers = ("pyproject.toml", "config.yaml")
    for start in (Path(__file__).resolve(), Path.cwd().resolve()):
        for parent in [start, *start.parents]:
            if any((parent / marker).exists() for marker in markers):
                return parent

    return Path.cwd()
