from .project import load_policy_pack, load_project

__all__ = [
    "load_policy_pack",
    "load_project",
]
