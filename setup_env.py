import os
import secrets


def generate_secrets():
    print("Generating signing secret and password salt...")
    return secrets.token_urlsafe(48), secrets.token_urlsafe(16)


def render_env(env_example: str, jwt_secret: str, admin_salt: str, client_hours: int = 24) -> str:
    new_lines = []
    for line in env_example.splitlines():
        if line.startswith("JWT_SECRET="):
            new_lines.append(f"JWT_SECRET={jwt_secret}")
        elif line.startswith("ADMIN_SALT="):
            new_lines.append(f"ADMIN_SALT={admin_salt}")
        elif line.strip() == "CLIENT_TOKEN_EXPIRES_HOURS=":
            new_lines.append(f"CLIENT_TOKEN_EXPIRES_HOURS={client_hours}")
        else:
            new_lines.append(line)
    return "\n".join(new_lines) + "\n"


def setup_env():
    if os.path.exists(".env"):
        response = input("A .env file already exists. Overwrite it? (y/N): ")
        if response.lower() != 'y':
            print("Aborted.")
            return

    if not os.path.exists(".env.example"):
        print("Error: .env.example not found.")
        return

    print("Reading .env.example...")
    with open(".env.example", "r") as f:
        env_content = f.read()

    jwt_secret, admin_salt = generate_secrets()

    with open(".env", "w") as f:
        f.write(render_env(env_content, jwt_secret, admin_salt))

    # Rotating either value later invalidates every issued token / stored password hash
    print("SUCCESS: .env file created with new secrets.")


if __name__ == "__main__":
    setup_env()
