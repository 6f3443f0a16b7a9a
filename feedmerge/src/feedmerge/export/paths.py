from pathlib import Path

def get_output_dir(root: str = "data") -> Path:
    """
    Get (and create) the directory the merged documents are written to.
    """
    path = Path(root)
    path.mkdir(parents=True, exist_ok=True)
    return path
