from pathlib import Path

def test_repo_layout_has_pipeline_modules():
    repo_root = Path(__file__).resolve().parents[1]
    assert (repo_root / "app" / "main.py").exists()
    for rel in ["inspection/signatures.py", "inspection/encoding.py", "inspection/sanitizer.py",
                "extraction_cache.py", "content_lister.py", "readme/render.py"]:
        assert (repo_root / "app" / "core" / rel).exists(), rel
    assert (repo_root / "config" / "general.yaml").exists()

def test_pipeline_modules_import():
    import app.core.content_lister
    import app.core.readme.render
    import app.core.readme.suggest
    import app.core.stats
    import app.main
