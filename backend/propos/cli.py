# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/propos/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Create tables (if missing) and the default admin and cashier accounts.
# - python -m flask system seed-demo
#   Insert the demo catalog (categories and products) if the catalog is empty.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Users:
# - python -m flask users list
# - python -m flask users create --email kasir2@pos.com --name "Cashier 02" --role employee
#
# Shifts:
# - python -m flask shifts list --status open --limit 20

from decimal import Decimal

import click
from flask.cli import with_appcontext

from .errors import PosError
from .extensions import db
from .models import User, Product, Category, Shift
from .services import auth_service

DEFAULT_USERS = [
    {"email": "admin@pos.com", "password": "admin123", "name": "Admin User", "role": "admin"},
    {"email": "kasir@pos.com", "password": "kasir123", "name": "Cashier 01", "role": "employee"},
]

DEMO_PRODUCTS = [
    {"name": "Espresso Intenso", "category": "Coffee", "price": "3.50", "stock": 45,
     "image": "https://images.unsplash.com/photo-1514432324607-a09d9b4aefdd?w=400&q=80"},
    {"name": "Cappuccino Royale", "category": "Coffee", "price": "4.50", "stock": 28,
     "image": "https://images.unsplash.com/photo-1572442388796-11668a67e53d?w=400&q=80"},
    {"name": "Matcha Green Tea Latte", "category": "Tea", "price": "5.00", "stock": 15,
     "image": "https://images.unsplash.com/photo-1515825838458-f2a94b20105a?w=400&q=80"},
    {"name": "Blueberry Muffin", "category": "Bakery", "price": "3.25", "stock": 12,
     "image": "https://images.unsplash.com/photo-1558303420-f814d8a590f5?w=400&q=80"},
    {"name": "Chocolate Croissant", "category": "Bakery", "price": "3.75", "stock": 8,
     "image": "https://images.unsplash.com/photo-1555507036-ab1f4038808a?w=400&q=80"},
    {"name": "Iced Caramel Macchiato", "category": "Cold Drinks", "price": "5.50", "stock": 50,
     "image": "https://images.unsplash.com/photo-1461023058943-07fcbe16d735?w=400&q=80"},
]


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Initialize ProPOS: tables plus default users.

    Creates:
    - Users: admin@pos.com (admin), kasir@pos.com (employee)

    SECURITY: Change passwords immediately in production!
    """
    click.echo("START Initializing ProPOS...")
    db.create_all()

    for entry in DEFAULT_USERS:
        if auth_service.get_user_by_email(entry["email"]):
            click.echo(f"SKIP User exists: {entry['email']}")
            continue
        auth_service.create_user(**entry)
        click.echo(f"PASS Created user: {entry['email']} ({entry['role']})")

    click.echo("DONE ProPOS initialized")


@system_group.command('seed-demo')
@with_appcontext
def seed_demo():
    """Insert the demo catalog when no products exist yet."""
    if db.session.query(Product).count():
        click.echo("SKIP Catalog already has products")
        return

    for name in sorted({p["category"] for p in DEMO_PRODUCTS}):
        if not db.session.query(Category).filter_by(name=name).first():
            db.session.add(Category(name=name))

    for entry in DEMO_PRODUCTS:
        db.session.add(Product(
            name=entry["name"],
            category=entry["category"],
            price=Decimal(entry["price"]),
            stock=entry["stock"],
            image=entry["image"],
        ))

    db.session.commit()
    click.echo(f"PASS Seeded {len(DEMO_PRODUCTS)} products")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Confirm destructive reset')
@with_appcontext
def reset_db(yes):
    """DEV/TEST only: drop and recreate all tables."""
    if not yes:
        click.echo("ABORT Pass --yes to drop all data")
        return
    db.drop_all()
    db.create_all()
    click.echo("PASS Database reset")


@click.group('users')
def users_group():
    """User inspection and bootstrap."""


@users_group.command('list')
@with_appcontext
def list_users():
    users = db.session.query(User).order_by(User.email).all()
    if not users:
        click.echo("No users found")
        return
    for u in users:
        click.echo(f"{u.id}  {u.email:<30} {u.role:<9} {u.name}")


@users_group.command('create')
@click.option('--email', prompt=True)
@click.option('--name', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--role', type=click.Choice(["admin", "employee"]), default="employee", show_default=True)
@with_appcontext
def create_user_command(email, name, password, role):
    try:
        user = auth_service.create_user(email=email, password=password, name=name, role=role)
    except PosError as e:
        raise click.ClickException(str(e))
    click.echo(f"PASS Created user {user.email} ({user.role}) id={user.id}")


@click.group('shifts')
def shifts_group():
    """Shift inspection."""


@shifts_group.command('list')
@click.option('--status', type=click.Choice(["open", "closed"]), default=None)
@click.option('--limit', type=int, default=20, show_default=True)
@with_appcontext
def list_shifts(status, limit):
    query = db.session.query(Shift).order_by(Shift.start_time.desc())
    if status:
        query = query.filter_by(status=status)
    shifts = query.limit(limit).all()
    if not shifts:
        click.echo("No shifts found")
        return
    for s in shifts:
        click.echo(
            f"{s.id}  user={s.user_id} status={s.status:<6} "
            f"sales={s.total_sales} count={s.transaction_count} started={s.start_time:%Y-%m-%d %H:%M}"
        )


def register_commands(app):
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(shifts_group)
