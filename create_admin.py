import sys
import psycopg2
from pydantic import ValidationError
from store_rating.core.auth_utils import normalize_email
from store_rating.core.security import hash_password
from store_rating.core.config import settings
from store_rating.core.errors import format_validation_errors
from store_rating.schemas.user import AccountCreate
from urllib.parse import urlparse

def create_admin_user(name: str, email: str, password: str, address: str) -> bool:
    try:
        account = AccountCreate(name=name, email=email, password=password, address=address)
    except ValidationError as e:
        print(f"Error: {format_validation_errors(e.errors())}")
        return False

    try:
        db_url = urlparse(settings.DATABASE_URL.replace("postgresql+asyncpg://", "postgresql://"))
        
        conn = psycopg2.connect(
            host=db_url.hostname or "localhost",
            port=db_url.port or 5432,
            user=db_url.username or "postgres",
            password=db_url.password or "postgres",
            database=db_url.path.lstrip("/") or "postgres"
        )
        
        cursor = conn.cursor()
        email = normalize_email(account.email)
        
        cursor.execute("SELECT id FROM users WHERE lower(email) = %s", (email,))
        existing_user = cursor.fetchone()
        
        if existing_user:
            print(f"Error: User '{email}' already exists")
            cursor.close()
            conn.close()
            return False
        
        hashed_password = hash_password(account.password)
        
        cursor.execute(
            "INSERT INTO users (name, email, password_hash, address, role) "
            "VALUES (%s, %s, %s, %s, %s) RETURNING id",
            (account.name, email, hashed_password, account.address, "ADMIN")
        )
        
        user_id = cursor.fetchone()[0]
        conn.commit()
        
        print(f"Admin user '{email}' created successfully")
        print(f"User ID: {user_id}")
        print(f"Role: admin")
        
        cursor.close()
        conn.close()
        return True
        
    except Exception as e:
        print(f"Error creating admin user: {str(e)}")
        return False


def main():
    if len(sys.argv) < 5:
        print("Usage: python create_admin.py <name> <email> <password> <address>")
        sys.exit(1)
    
    name, email, password, address = sys.argv[1:5]
    
    success = create_admin_user(name, email, password, address)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
