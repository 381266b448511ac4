import json
from pathlib import Path
from string import Template
from typing import Dict, List, Optional

REQUIRED_PROMPTS = {"analysis": ("system", "user")}


class PromptLoader:
    """Load and render versioned prompt templates for writing analysis."""

    def __init__(self, prompts_dir: Optional[str] = None, version: str = "v1.0.0") -> None:
        """
        Initialize the prompt loader.

        - If `prompts_dir` is None, resolve to the `prompts` directory shipped
          inside the `writing_eval` package.
        - If `prompts_dir` is provided and not found relative to the CWD,
          also try resolving it relative to the package root.
        """
        package_root = Path(__file__).resolve().parents[1]

        if prompts_dir is None:
            self.prompts_dir: Path = package_root / "prompts"
        else:
            candidate = Path(prompts_dir)
            self.prompts_dir = candidate if candidate.exists() else (package_root / candidate)

        self.version = version
        self._prompts_cache: Dict[str, Dict[str, str]] = {}
        self._load_prompts()

    def _load_prompts(self) -> None:
        """Load all prompts from the versioned directory."""
        version_dir = self.prompts_dir / self.version

        if not version_dir.exists():
            raise FileNotFoundError(
                f"Prompts directory not found: {version_dir}. "
                f"Please ensure the prompts are properly set up in {version_dir}"
            )

        for name, roles in REQUIRED_PROMPTS.items():
            json_file = version_dir / f"{name}.json"
            if not json_file.exists():
                raise FileNotFoundError(f"Required prompt file not found: {json_file}")

            try:
                with open(json_file, "r", encoding="utf-8") as file:
                    prompts_data: Dict[str, str] = json.load(file)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Error loading prompts from {json_file}: {exc}") from exc

            for role in roles:
                if not isinstance(prompts_data.get(role), str) or not prompts_data[role].strip():
                    raise ValueError(f"Missing '{role}' prompt in {json_file}")
            self._prompts_cache[name] = prompts_data

    def load_prompt(self, name: str, role: str) -> str:
        """Return the raw template text for `name`/`role` (e.g. "analysis"/"user")."""
        if name not in self._prompts_cache:
            raise ValueError(
                f"No prompts found for: '{name}'. "
                f"Available prompts: {list(self._prompts_cache.keys())}"
            )
        templates = self._prompts_cache[name]
        if role not in templates:
            raise ValueError(
                f"No '{role}' prompt in '{name}'. Available roles: {list(templates.keys())}"
            )
        return templates[role]

    def render_messages(self, *, exam_level: str, task_type: str, writing: str) -> List[Dict[str, str]]:
        """Chat messages for one analysis request.

        Templates use `$placeholders` because the prompt text itself carries JSON braces.
        """
        variables = {"exam_level": exam_level, "task_type": task_type, "writing": writing}
        return [
            {
                "role": "system",
                "content": Template(self.load_prompt("analysis", "system")).safe_substitute(variables),
            },
            {
                "role": "user",
                "content": Template(self.load_prompt("analysis", "user")).safe_substitute(variables),
            },
        ]

    def get_available_prompts(self) -> List[str]:
        return list(self._prompts_cache.keys())

    def reload_prompts(self) -> None:
        """Reload prompts from files (useful for development/testing)."""
        self._prompts_cache.clear()
        self._load_prompts()
