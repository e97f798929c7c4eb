# docker_relay/core/translator.py
"""
Natural language to docker command translation

An ordered table of pattern/template rules. The phrase is trimmed and matched
case-insensitively against each rule in turn; the first match builds the
command line from its captured groups. Noun-qualified rules (volume, network,
image) sit ahead of the bare container verbs so that "remove volume x" never
reaches "remove x".
"""
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import structlog

from ..common.exceptions import ValidationError

logger = structlog.get_logger()

# Refuses a bare stop word as a name, not a name that starts with one
_STOP_WORDS = r"(?!(?:from|for|of|to|in|into|inside|with|and|the|all|on)(?![a-z0-9_./:-]))"


def _name(group: str = "name") -> str:
    """Container / volume / network name capture"""
    return rf"(?P<{group}>{_STOP_WORDS}[a-z0-9_-]+)"


def _image(group: str = "image") -> str:
    """Image reference capture, tag included when written as name:tag"""
    return rf"(?P<{group}>{_STOP_WORDS}[a-z0-9/_.-]+(?::[a-z0-9._-]+)?)"


# Sub-commands after which an input is already a docker invocation
DOCKER_SUBCOMMANDS = (
    "attach", "build", "builder", "buildx", "commit", "compose", "config", "container", "context",
    "cp", "create", "diff", "events", "exec", "export", "history", "image", "images", "import",
    "info", "inspect", "kill", "load", "login", "logout", "logs", "manifest", "network", "node",
    "pause", "plugin", "port", "ps", "pull", "push", "rename", "restart", "rm", "rmi", "run",
    "save", "search", "secret", "service", "stack", "start", "stats", "stop", "swarm", "system",
    "tag", "top", "trust", "unpause", "update", "version", "volume", "wait",
)

PASS_THROUGH = re.compile(
    r"^(?:docker\s+(?:" + "|".join(DOCKER_SUBCOMMANDS) + r")\b|docker-compose\b)", re.IGNORECASE
)

_DOCKER_TOKEN = re.compile(
    r"^(?:docker\s+(?:" + "|".join(DOCKER_SUBCOMMANDS) + r")\b|docker(?:-compose)?\b)", re.IGNORECASE
)


def _docker_lower(text: str) -> str:
    """Lower-case the docker (and known sub-command) prefix, arguments untouched"""
    return _DOCKER_TOKEN.sub(lambda m: m.group(0).lower(), text, count=1)


def _has(text: str, *words: str) -> bool:
    """Whole-word, case-insensitive keyword test; a hyphenated name is one word"""
    return any(re.search(rf"(?<![\w-]){re.escape(word)}(?![\w-])", text, re.IGNORECASE) for word in words)


def _search(pattern: str, text: str) -> Optional[re.Match]:
    return re.search(pattern, text, re.IGNORECASE)


def _service_arg(text: str, pattern: str = r"\bservice\s+([a-z0-9_-]+)") -> str:
    match = _search(pattern, text)
    return f" {match.group(1)}" if match else ""


@dataclass(frozen=True)
class TranslationRule:
    """One pattern/template pair of the cascade"""

    name: str
    pattern: re.Pattern
    build: Callable[[re.Match, str], str]


# --- builders -----------------------------------------------------------------


def _list_containers(match: re.Match, text: str) -> str:
    if _has(text, "all", "stopped"):
        return "docker ps -a"
    if _has(text, "running"):
        return "docker ps"
    return "docker ps -a"


def _list_images(match: re.Match, text: str) -> str:
    return "docker images -f dangling=true" if _has(text, "dangling") else "docker images"


def _list_volumes(match: re.Match, text: str) -> str:
    return "docker volume ls -f dangling=true" if _has(text, "dangling") else "docker volume ls"


def _compose_up(match: re.Match, text: str) -> str:
    detached = "" if _has(text, "foreground", "attached") else " -d"
    build = " --build" if _has(text, "build", "rebuild") else ""
    return f"docker-compose up{detached}{build}{_service_arg(text)}"


def _compose_down(match: re.Match, text: str) -> str:
    volumes = " --volumes" if _has(text, "volumes", "data") else ""
    images = " --rmi all" if _has(text, "images") else ""
    return f"docker-compose down{volumes}{images}"


def _compose_logs(match: re.Match, text: str) -> str:
    follow = " -f" if _has(text, "follow", "tail") else ""
    service = _service_arg(text, r"\b(?:from|service)\s+([a-z0-9_-]+)")
    return f"docker-compose logs{follow}{service}"


def _compose_restart(match: re.Match, text: str) -> str:
    return f"docker-compose restart{_service_arg(text)}"


def _compose_build(match: re.Match, text: str) -> str:
    no_cache = " --no-cache" if _has(text, "fresh", "clean") else ""
    return f"docker-compose build{no_cache}{_service_arg(text)}"


def _network_create(match: re.Match, text: str) -> str:
    driver = match.group("driver")
    if not driver:
        driver = "bridge" if _has(text, "bridge") else "overlay" if _has(text, "overlay") else None
    driver_arg = f" --driver {driver.lower()}" if driver else ""
    return f"docker network create{driver_arg} {match.group('name')}"


def _explicit_tag(text: str) -> str:
    for pattern in (r"\btag\s+(?!as\b)([a-z0-9._-]+)", r"\bwith\s+(?:the\s+)?([a-z0-9._-]+)\s+tag\b"):
        found = _search(pattern, text)
        if found:
            return found.group(1)
    return ""


def _image_pull(match: re.Match, text: str) -> str:
    image = match.group("image")
    if ":" not in image:
        tag = _explicit_tag(text) or ("latest" if _has(text, "latest") else "")
        image = f"{image}:{tag}" if tag else image
    return f"docker pull {image}"


def _image_push(match: re.Match, text: str) -> str:
    image = match.group("image")
    if ":" not in image:
        tag = _explicit_tag(text)
        image = f"{image}:{tag}" if tag else image
    return f"docker push {image}"


def _image_build(match: re.Match, text: str) -> str:
    dockerfile = ""
    if _has(text, "dockerfile"):
        found = _search(r"\bdockerfile[:\s]+(?!for\b|with\b)([^\s]+)", text)
        dockerfile = f" -f {found.group(1) if found else 'Dockerfile'}"

    context = "."
    if not _search(r"\b(?:from|in)\s+(?:the\s+)?(?:current|this)\s+(?:directory|dir|folder)\b", text):
        found = _search(r"\b(?:from|in)\s+([^\s]+)", text)
        if found:
            context = found.group(1)
    return f"docker build{dockerfile} -t {match.group('image')} {context}"


def _image_remove(match: re.Match, text: str) -> str:
    force = " -f" if _has(text, "force") else ""
    return f"docker rmi{force} {match.group('image')}"


def _container_exec(match: re.Match, text: str) -> str:
    shell = match.group("shell")
    if not shell:
        shell = "bash" if _has(text, "bash") else "sh" if _has(text, "sh") else "bash"
    return f"docker exec -it {match.group('name')} {shell.lower()}"


def _container_logs(match: re.Match, text: str) -> str:
    follow = " -f" if _has(text, "follow", "following") else ""
    lines = _search(r"\b(\d+)\s+lines?\b", text)
    tail = f" --tail {lines.group(1)}" if lines else ""
    return f"docker logs{follow}{tail} {match.group('name')}"


def _container_remove(match: re.Match, text: str) -> str:
    force = " -f" if _has(text, "force") else ""
    return f"docker rm{force} {match.group('name')}"


def _copy(match: re.Match, text: str) -> str:
    path, container = match.group("path"), match.group("name")
    if match.group("direction").lower() == "from":
        return f"docker cp {container}:{path} ."
    return f"docker cp {path} {container}:/tmp/"


def _registry(verb: str) -> Callable[[re.Match, str], str]:
    def build(match: re.Match, text: str) -> str:
        registry = match.group("registry")
        return f"docker {verb} {registry}" if registry else f"docker {verb}"

    return build


def _disk_usage(match: re.Match, text: str) -> str:
    verbose = " -v" if _has(text, "verbose", "detailed") else ""
    return f"docker system df{verbose}"


def _stats(match: re.Match, text: str) -> str:
    stream = _has(text, "follow", "continuous")
    return "docker stats" if stream else "docker stats --no-stream"


def _prune(match: re.Match, text: str) -> str:
    if _has(text, "all", "everything"):
        return "docker system prune -a -f"
    if _has(text, "volumes"):
        return "docker system prune --volumes -f"
    return "docker system prune -f"


def _fixed(command: str) -> Callable[[re.Match, str], str]:
    return lambda match, text: command


def _template(template: str) -> Callable[[re.Match, str], str]:
    return lambda match, text: template.format(**match.groupdict())


# --- rule table -----------------------------------------------------------------

_SERVICES = r"(?:all\s+)?(?:the\s+)?services\b"

RULE_TABLE: List[Tuple[str, str, Callable[[re.Match, str], str]]] = [
    # listings
    ("list_containers", r"\b(?:list|show|display|get)\s+(?:me\s+)?(?:all\s+)?(?:the\s+)?(?:containers?|running|stopped)\b", _list_containers),
    ("running_containers", r"\b(?:what|which)\s+containers?\s+(?:are\s+)?(?:running|active)\b", _fixed("docker ps")),
    ("list_images", r"\b(?:list|show|display|get)\s+(?:me\s+)?(?:all\s+)?(?:dangling\s+)?(?:images?|repos?|repositories)\b", _list_images),
    ("list_volumes", r"\b(?:list|show|display)\s+(?:me\s+)?(?:all\s+)?(?:dangling\s+)?(?:volumes?|storage)\b", _list_volumes),
    ("list_networks", r"\b(?:list|show|display)\s+(?:me\s+)?(?:all\s+)?(?:networks?|networking)\b", _fixed("docker network ls")),
    # compose, explicit
    ("compose_up", rf"\bcompose\s+up\b|\b(?:start|launch)\s+{_SERVICES}|\bstart\s+and\s+rebuild\b", _compose_up),
    ("compose_down", rf"\bcompose\s+down\b|\b(?:stop|halt)\s+{_SERVICES}", _compose_down),
    ("compose_logs", r"\bcompose\s+(?:logs|output)\b", _compose_logs),
    ("compose_ps", r"\bcompose\s+(?:ps|status|services)\b", _fixed("docker-compose ps")),
    ("compose_restart", rf"\bcompose\s+(?:restart|reboot)\b|\brestart\s+{_SERVICES}", _compose_restart),
    ("compose_build", rf"\bcompose\s+(?:build|rebuild)\b|\brebuild\s+{_SERVICES}", _compose_build),
    # volumes
    ("volume_prune", r"\b(?:clean\s*up|prune)\s+(?:all\s+)?(?:unused\s+|dangling\s+)?volumes\b", _fixed("docker volume prune -f")),
    ("volume_create", rf"\b(?:create|make)\s+(?:a\s+)?(?:new\s+)?volume\s+(?:(?:for|named|called)\s+)?{_name()}", _template("docker volume create {name}")),
    ("volume_remove", rf"\b(?:remove|delete|rm)\s+(?:the\s+)?volume\s+{_name()}", _template("docker volume rm {name}")),
    ("volume_inspect", rf"\b(?:inspect|examine)\s+(?:the\s+)?volume\s+{_name()}", _template("docker volume inspect {name}")),
    # networks
    ("network_prune", r"\b(?:clean\s*up|prune)\s+(?:all\s+)?(?:unused\s+)?networks\b", _fixed("docker network prune -f")),
    ("network_create", rf"\b(?:create|make)\s+(?:a\s+)?(?:new\s+)?(?:(?P<driver>bridge|overlay|host|macvlan)\s+)?network\s+(?:(?:named|called)\s+)?{_name()}", _network_create),
    ("network_remove", rf"\b(?:remove|delete|rm)\s+(?:the\s+)?network\s+{_name()}", _template("docker network rm {name}")),
    ("network_inspect", rf"\b(?:inspect|examine)\s+(?:the\s+)?network\s+{_name()}", _template("docker network inspect {name}")),
    ("network_disconnect", rf"\b(?:disconnect|detach)\s+(?:container\s+)?{_name('container')}\s+(?:from\s+)?(?:network\s+)?{_name('network')}", _template("docker network disconnect {network} {container}")),
    ("network_connect", rf"\b(?:connect|attach)\s+(?:container\s+)?{_name('container')}\s+(?:to\s+)?(?:network\s+)?{_name('network')}", _template("docker network connect {network} {container}")),
    # images
    ("image_pull", rf"\b(?:pull|download|fetch)\s+(?:the\s+)?(?:image\s+)?{_image()}", _image_pull),
    ("image_push", rf"\b(?:push|upload)\s+(?:the\s+)?(?:image\s+)?{_image()}", _image_push),
    ("image_build", rf"\bbuild\s+(?:an?\s+)?(?:image\s+)?{_image()}", _image_build),
    ("image_create", rf"\bcreate\s+(?:an?\s+)?image\s+{_image()}", _image_build),
    ("image_remove", rf"\b(?:(?:remove|delete|rm)\s+(?:the\s+)?image|rmi)\s+{_image()}", _image_remove),
    ("image_tag", rf"\b(?:tag|label)\s+(?:image\s+)?{_image('source')}\s+(?:as\s+)?{_image('target')}", _template("docker tag {source} {target}")),
    # container specific
    ("container_exec", rf"\b(?:exec|execute|run)\s+(?:(?P<shell>bash|sh|ash|zsh)\s+)?(?:in|into|inside)\s+(?:container\s+)?{_name()}", _container_exec),
    ("container_top", rf"\b(?:processes|process|ps|top)\s+(?:running\s+)?(?:in|inside|of)\s+(?:container\s+)?{_name()}", _template("docker top {name}")),
    ("container_port", rf"\bports?\s+(?:mappings?\s+)?(?:(?:of|for)\s+)?(?:container\s+)?{_name()}", _template("docker port {name}")),
    ("container_stats", rf"\b(?:stats|statistics)\s+(?:for|of)\s+(?:container\s+)?{_name()}", _template("docker stats --no-stream {name}")),
    ("container_diff", rf"\b(?:changes|diff)\s+(?:in|of|for)\s+(?:container\s+)?{_name()}", _template("docker diff {name}")),
    ("container_logs", rf"\b(?:logs?|output)\s+(?:from|for|of)\s+(?:container\s+)?{_name()}", _container_logs),
    ("container_logs_trailing", rf"\b(?:from|of|for)\s+(?:container\s+)?{_name()}\s+(?:logs?|output)\b", _container_logs),
    ("container_logs_direct", rf"\blogs?\s+(?:container\s+)?{_name()}", _container_logs),
    # container lifecycle
    ("container_restart", rf"\b(?:restart|reboot)\s+(?:the\s+)?(?:container\s+)?{_name()}", _template("docker restart {name}")),
    ("container_kill", rf"\bkill\s+(?:the\s+)?(?:container\s+)?{_name()}", _template("docker kill {name}")),
    ("container_stop", rf"\b(?:stop|halt)\s+(?:the\s+)?(?:container\s+)?{_name()}", _template("docker stop {name}")),
    ("container_start", rf"\b(?:start|run|launch)\s+(?:the\s+)?(?:container\s+)?{_name()}", _template("docker start {name}")),
    ("container_remove", rf"\b(?:remove|delete|rm)\s+(?:the\s+)?(?:container\s+)?{_name()}", _container_remove),
    ("container_inspect", rf"\b(?:inspect|examine|details?)\s+(?:of\s+)?(?:the\s+)?(?:container\s+)?{_name()}", _template("docker inspect {name}")),
    # hub, files, registry
    ("search", rf"\b(?:search|find)\s+(?:for\s+)?(?:image\s+)?{_image('term')}", _template("docker search {term}")),
    ("copy", rf"\b(?:copy|cp)\s+(?P<path>\S+)\s+(?P<direction>from|to)\s+(?:container\s+)?{_name()}", _copy),
    ("logout", r"\blogout\b(?:\s+(?:from\s+)?(?P<registry>[a-z0-9._:-]+))?", _registry("logout")),
    ("login", r"\blogin\b(?:\s+(?:to\s+)?(?P<registry>[a-z0-9._:-]+))?", _registry("login")),
    # system
    ("disk_usage", r"\bdisk\s+(?:usage|space)\b|\bstorage\s+(?:usage|info)\b|\bspace\b", _disk_usage),
    ("system_info", r"\b(?:system\s+)?(?:info|information)\b", _fixed("docker system info")),
    ("version", r"\b(?:version|ver)\b", _fixed("docker --version && docker-compose --version")),
    ("stats", r"\b(?:stats|statistics|status|monitor)\b", _stats),
    ("prune", r"\b(?:clean\s*up|prune)\b", _prune),
    # compose, bare verbs
    ("compose_up_bare", r"\b(?:up|start|launch)\b", _compose_up),
    ("compose_down_bare", r"\b(?:down|stop|halt)\b", _compose_down),
    ("compose_logs_bare", r"\b(?:logs|output)\b", _compose_logs),
    ("compose_ps_bare", r"\b(?:ps|services)\b", _fixed("docker-compose ps")),
    ("compose_restart_bare", r"\b(?:restart|reboot)\b", _compose_restart),
    ("compose_build_bare", r"\b(?:build|rebuild)\b", _compose_build),
    ("help", r"\b(?:help|usage|commands)\b", _fixed("docker --help")),
]


class CommandTranslator:
    """
    Translate a phrase into a docker command line

    First matching rule wins; inputs that match nothing fall back to being
    treated as docker arguments.
    """

    def __init__(self, rules: Optional[List[Tuple[str, str, Callable[[re.Match, str], str]]]] = None):
        self.rules: List[TranslationRule] = [
            TranslationRule(name=name, pattern=re.compile(pattern, re.IGNORECASE), build=build)
            for name, pattern, build in (rules if rules is not None else RULE_TABLE)
        ]

    def explain(self, phrase: str) -> Tuple[str, str]:
        """Return (rule name, command) for a phrase"""
        if phrase is None or not phrase.strip():
            raise ValidationError("Command is required", field="command")

        text = phrase.strip()

        if PASS_THROUGH.match(text):
            return "pass_through", _docker_lower(text)

        for rule in self.rules:
            match = rule.pattern.search(text)
            if match:
                return rule.name, rule.build(match, text)

        if text.lower().startswith("docker"):
            return "fallback_pass_through", _docker_lower(text)
        return "fallback", f"docker {text}"

    def translate(self, phrase: str) -> str:
        """Return the docker command line for a phrase"""
        rule_name, command = self.explain(phrase)
        logger.debug("Phrase translated", phrase=phrase, rule=rule_name, command=command)
        return command


# Global translator instance
_translator_instance: Optional[CommandTranslator] = None


def get_translator() -> CommandTranslator:
    """Get singleton translator instance"""
    global _translator_instance
    if _translator_instance is None:
        _translator_instance = CommandTranslator()
    return _translator_instance


def translate(phrase: str) -> str:
    """Translate with the shared translator"""
    return get_translator().translate(phrase)
