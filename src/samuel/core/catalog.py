"""Built-in component catalog for the samuel template repository."""

from samuel.core.models import TEMPLATE_PREFIX, Component, ComponentType
from samuel.core.registry import Preset, Registry

# (name, description)
LANGUAGES: tuple[tuple[str, str], ...] = (
    ("typescript", "TypeScript/JavaScript"),
    ("python", "Python"),
    ("go", "Go"),
    ("rust", "Rust"),
    ("kotlin", "Kotlin"),
    ("java", "Java"),
    ("csharp", "C#/.NET"),
    ("php", "PHP"),
    ("swift", "Swift"),
    ("cpp", "C/C++"),
    ("ruby", "Ruby"),
    ("sql", "SQL"),
    ("shell", "Shell/Bash"),
    ("r", "R"),
    ("dart", "Dart"),
    ("html-css", "HTML/CSS"),
    ("lua", "Lua"),
    ("assembly", "Assembly"),
    ("cuda", "CUDA"),
    ("solidity", "Solidity"),
    ("zig", "Zig"),
)

FRAMEWORKS: tuple[tuple[str, str], ...] = (
    ("react", "React"),
    ("nextjs", "Next.js"),
    ("express", "Express.js"),
    ("django", "Django"),
    ("fastapi", "FastAPI"),
    ("flask", "Flask"),
    ("gin", "Gin"),
    ("echo", "Echo"),
    ("fiber", "Fiber"),
    ("axum", "Axum"),
    ("actix-web", "Actix-web"),
    ("rocket", "Rocket"),
    ("spring-boot-kotlin", "Spring Boot (Kotlin)"),
    ("ktor", "Ktor"),
    ("android-compose", "Android Compose"),
    ("spring-boot-java", "Spring Boot (Java)"),
    ("quarkus", "Quarkus"),
    ("micronaut", "Micronaut"),
    ("aspnet-core", "ASP.NET Core"),
    ("blazor", "Blazor"),
    ("unity", "Unity"),
    ("laravel", "Laravel"),
    ("symfony", "Symfony"),
    ("wordpress", "WordPress"),
    ("swiftui", "SwiftUI"),
    ("uikit", "UIKit"),
    ("vapor", "Vapor"),
    ("rails", "Rails"),
    ("sinatra", "Sinatra"),
    ("hanami", "Hanami"),
    ("flutter", "Flutter"),
    ("shelf", "Shelf"),
    ("dart-frog", "Dart Frog"),
)

WORKFLOWS: tuple[tuple[str, str], ...] = (
    ("initialize-project", "Project setup"),
    ("create-rfd", "Technical decision documents"),
    ("create-prd", "Requirements documents"),
    ("generate-tasks", "Task breakdown"),
    ("code-review", "Pre-commit quality review"),
    ("security-audit", "Security assessment"),
    ("testing-strategy", "Test planning"),
    ("cleanup-project", "Prune unused guides"),
    ("refactoring", "Technical debt remediation"),
    ("dependency-update", "Safe dependency updates"),
    ("update-framework", "Framework version updates"),
    ("troubleshooting", "Debugging workflow"),
    ("generate-agents-md", "Cross-tool compatibility"),
    ("document-work", "Capture patterns"),
    ("create-skill", "Create Agent Skills"),
)

# Core files always installed. Named by their destination path.
CORE_TEMPLATES: tuple[tuple[str, str], ...] = (
    ("CLAUDE.md", "Primary AI assistant instructions"),
    ("AI_INSTRUCTIONS.md", "Tool-agnostic instructions"),
    (".agent/README.md", "Agent directory overview"),
    (".agent/project.md.template", "Project context template"),
    (".agent/state.md.template", "Session state template"),
    (".agent/skills/README.md", "Skills index"),
    (".agent/workflows/README.md", "Workflow index"),
    (".agent/memory/.gitkeep", "Memory directory placeholder"),
    (".agent/tasks/.gitkeep", "Tasks directory placeholder"),
    (".agent/rfd/.gitkeep", "RFD directory placeholder"),
)


def _component(
    component_type: ComponentType,
    name: str,
    dest_path: str,
    description: str,
    *,
    is_directory: bool = False,
) -> Component:
    return Component(
        type=component_type,
        name=name,
        source_path=f"{TEMPLATE_PREFIX}/{dest_path}",
        dest_path=dest_path,
        description=description,
        is_directory=is_directory,
    )


def default_components() -> list[Component]:
    components: list[Component] = []
    for name, description in CORE_TEMPLATES:
        components.append(_component("template", name, name, description))
    for name, description in LANGUAGES:
        components.append(
            _component("language", name, f".agent/language-guides/{name}.md", description)
        )
    for name, description in FRAMEWORKS:
        # Framework guides are skill directories with supporting references
        components.append(
            _component("framework", name, f".agent/skills/{name}", description, is_directory=True)
        )
    for name, description in WORKFLOWS:
        components.append(_component("workflow", name, f".agent/workflows/{name}.md", description))
    return components


def default_presets() -> list[Preset]:
    return [
        Preset(
            name="full",
            description="All guides and workflows",
            languages=tuple(name for name, _ in LANGUAGES),
            frameworks=tuple(name for name, _ in FRAMEWORKS),
            workflows=None,
        ),
        Preset(
            name="starter",
            description="Core files + common languages (TypeScript, Python, Go)",
            languages=("typescript", "python", "go"),
            frameworks=(),
            workflows=None,
        ),
        Preset(
            name="minimal",
            description="Just CLAUDE.md and workflows",
            languages=(),
            frameworks=(),
            workflows=None,
        ),
    ]


def build_default_registry() -> Registry:
    """Build the registry used by the CLI."""
    return Registry(default_components(), default_presets())
