# docker_relay/modules/help.py
"""Text served by the docker://help resource"""

HELP_URI = "docker://help"

HELP_TEXT = """Docker MCP Server - Natural Language Docker Commands

=== CONTAINER OPERATIONS ===
Lifecycle:
- "list all containers" / "show containers" -> docker ps -a
- "list running containers" / "what containers are running" -> docker ps
- "start container nginx" / "launch nginx" -> docker start nginx
- "stop container myapp" / "halt myapp" -> docker stop myapp
- "restart container web" / "reboot web" -> docker restart web
- "remove container old-app" / "delete old-app" -> docker rm old-app
- "kill container stuck-app" -> docker kill stuck-app

Inspection:
- "inspect container nginx" / "examine nginx" -> docker inspect nginx
- "logs from container web" / "show logs for web" -> docker logs web
- "follow logs from api" -> docker logs -f api
- "last 50 lines from web logs" -> docker logs --tail 50 web
- "execute bash in container web" / "run bash into web" -> docker exec -it web bash
- "processes in container api" / "top in api" -> docker top api
- "ports of container web" / "port mappings for web" -> docker port web
- "stats for container api" -> docker stats --no-stream api
- "changes in container web" -> docker diff web

=== IMAGE OPERATIONS ===
- "list images" / "show all images" -> docker images
- "list dangling images" -> docker images -f dangling=true
- "pull image nginx" / "download nginx" -> docker pull nginx
- "pull nginx with tag latest" -> docker pull nginx:latest
- "push image myapp" / "upload myapp" -> docker push myapp
- "remove image old-version" -> docker rmi old-version
- "force remove image stuck" -> docker rmi -f stuck
- "tag image myapp as production" -> docker tag myapp production
- "build image myapp" -> docker build -t myapp .
- "build image myapp with dockerfile Dockerfile.prod" -> docker build -f Dockerfile.prod -t myapp .
- "create image webapp from current directory" -> docker build -t webapp .
- "search for nginx images" -> docker search nginx

=== VOLUME OPERATIONS ===
- "list volumes" / "show all volumes" -> docker volume ls
- "list dangling volumes" -> docker volume ls -f dangling=true
- "create volume mydata" / "make volume storage" -> docker volume create mydata
- "remove volume old-data" / "delete volume temp" -> docker volume rm old-data
- "inspect volume mydata" / "examine volume storage" -> docker volume inspect mydata
- "cleanup unused volumes" -> docker volume prune -f

=== NETWORK OPERATIONS ===
- "list networks" / "show networks" -> docker network ls
- "create network mynet" / "make network backend" -> docker network create mynet
- "create bridge network frontend" -> docker network create --driver bridge frontend
- "create overlay network cluster" -> docker network create --driver overlay cluster
- "remove network old-net" / "delete network temp" -> docker network rm old-net
- "inspect network mynet" -> docker network inspect mynet
- "connect container web to network backend" -> docker network connect backend web
- "disconnect container api from network frontend" -> docker network disconnect frontend api
- "cleanup unused networks" -> docker network prune -f

=== SYSTEM OPERATIONS ===
- "system info" / "docker information" -> docker system info
- "version" -> docker --version && docker-compose --version
- "stats" / "monitor containers" -> docker stats --no-stream
- "continuous stats" / "follow stats" -> docker stats
- "disk usage" / "storage usage" -> docker system df
- "detailed disk usage" / "verbose storage info" -> docker system df -v
- "cleanup" / "prune system" -> docker system prune -f
- "cleanup everything" / "prune all" -> docker system prune -a -f
- "cleanup with volumes" -> docker system prune --volumes -f

=== DOCKER COMPOSE ===
- "compose up" / "start services" -> docker-compose up -d
- "compose up in foreground" -> docker-compose up
- "compose up with build" / "start and rebuild" -> docker-compose up -d --build
- "compose up service web" -> docker-compose up -d web
- "compose down" / "stop services" -> docker-compose down
- "compose down with volumes" -> docker-compose down --volumes

Anything already written as a docker command ("docker ps -a") runs unchanged.

=== TOOLS ===
1. execute_docker_command - natural language or direct docker command
2. manage_containers - list, start, stop, remove, restart
3. manage_images - list, pull, remove, build
4. manage_volumes - list, create, remove, inspect, prune
5. manage_networks - list, create, remove, inspect, connect, disconnect, prune
6. create_container - docker run with ports, volumes, environment, health check,
   resource limits, security options, labels and project_name
7. docker_registry - search, login, logout, push, pull, tag
8. docker_monitoring - logs, inspect, exec, top, port, stats, events, diff
9. docker_info - info, version, stats, disk_usage
10. docker_compose - up, down, logs, ps, restart, build
11. docker_compose_advanced - plan, apply, destroy, status of a labelled project
12. docker_remote_connection - connect, disconnect, status, test
13. docker_monitoring_advanced - live_stats, health, events, system_info, performance
14. docker_backup_migration - backup_container, export_project, list_backups, cleanup_backups

=== PROJECTS ===
1. docker_compose_advanced action=plan project_name=blog containers="wordpress with mysql"
2. Review the plan, then action=apply
3. action=status to see the labelled resources, action=destroy to remove them

Resources created with a project_name carry the label mcp-server-docker.project=<name>.

=== REMOTE HOSTS ===
- docker_remote_connection action=connect host=ssh://admin@server.example.com
- docker_remote_connection action=connect host=tcp://remote-host:2376
- action=disconnect returns to the local daemon

=== BACKUPS ===
- docker_backup_migration action=backup_container container_name=nginx
- docker_backup_migration action=export_project project_name=blog backup_path=/backups
- action=list_backups, action=cleanup_backups days=7
"""
