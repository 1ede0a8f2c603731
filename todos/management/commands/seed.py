from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone
from rest_framework.exceptions import APIException

from accounts.services import UsersService
from teams.models import Team
from teams.services import TeamsService
from todos.models import Todo
from todos.services import TodosService

DEMO_USERS = [
    {"email": "sam@example.com", "password": "password123", "first_name": "Sam", "last_name": "Jose"},
    {"email": "john@example.com", "password": "password", "first_name": "John", "last_name": "Doe"},
    {"email": "jane@example.com", "password": "password", "first_name": "Jane", "last_name": "Smith"},
    {"email": "bob@example.com", "password": "password", "first_name": "Bob", "last_name": "Johnson"},
]

DEMO_TEAMS = [
    {"name": "Development Team", "description": "Main development team for the project"},
    {"name": "Design Team", "description": "UI/UX design team"},
    {"name": "Marketing Team", "description": "Marketing and promotion team"},
]

# (team index, member email)
DEMO_MEMBERSHIPS = [
    (0, "john@example.com"),
    (0, "jane@example.com"),
    (1, "bob@example.com"),
]

# (title, description, due in days, team index, assignee index)
DEMO_TODOS = [
    ("Setup project structure",
     "Initialize the project with proper folder structure and configuration", 2, 0, 1),
    ("Design user interface",
     "Create wireframes and mockups for the application", 5, 1, 3),
    ("Implement authentication",
     "Set up JWT authentication and user management", 3, 0, 2),
    ("Create marketing materials",
     "Design brochures and promotional content", 7, 2, None),
    ("Write API documentation",
     "Document all API endpoints and provide usage examples", 4, 0, 1),
]


class Command(BaseCommand):
    help = "Populate the database with demo users, teams and todos"

    def handle(self, *args, **kwargs):
        self.stdout.write("Seeding demo data...")

        users_service = UsersService()
        teams_service = TeamsService(users_service=users_service)
        todos_service = TodosService(gateway=teams_service.gateway, teams_service=teams_service)

        users = []
        for user_data in DEMO_USERS:
            user = users_service.find_by_email(user_data["email"])
            if user:
                self.stdout.write(f"User already exists: {user.email}")
            else:
                user = users_service.create(user_data)
                self.stdout.write(self.style.SUCCESS(f"Created user: {user.email}"))
            users.append(user)

        owner = users[0]

        teams = []
        for team_data in DEMO_TEAMS:
            team = Team.objects.filter(name=team_data["name"], owner=owner).first()
            if team:
                self.stdout.write(f"Team already exists: {team.name}")
            else:
                team = teams_service.create(team_data, owner)
                self.stdout.write(self.style.SUCCESS(f"Created team: {team.name} (Owner: {owner.email})"))
            teams.append(team)

        for team_index, email in DEMO_MEMBERSHIPS:
            team = teams[team_index]
            if team.members.filter(email__iexact=email).exists():
                continue
            try:
                teams_service.add_member(team.pk, email, owner)
                self.stdout.write(self.style.SUCCESS(f"Added {email} to {team.name}"))
            except APIException as e:
                self.stdout.write(self.style.ERROR(f"Error adding {email} to {team.name}: {e}"))

        now = timezone.now()
        for title, description, days, team_index, assignee_index in DEMO_TODOS:
            if Todo.objects.filter(title=title, created_by=owner).exists():
                self.stdout.write(f"Todo already exists: {title}")
                continue
            data = {
                "title": title,
                "description": description,
                "due_date": now + timedelta(days=days),
                "team_id": teams[team_index].pk,
            }
            if assignee_index is not None:
                data["assignee_id"] = users[assignee_index].pk
            try:
                todo = todos_service.create(data, owner)
                self.stdout.write(self.style.SUCCESS(f"Created todo: {todo.title}"))
            except APIException as e:
                self.stdout.write(self.style.ERROR(f"Error creating todo {title}: {e}"))

        self.stdout.write(self.style.SUCCESS("Seeding completed"))
        self.stdout.write("Demo login: sam@example.com / password123")
