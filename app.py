from dotenv import load_dotenv

from edumanage.main import create_app

load_dotenv(override=False)

app = create_app()

if __name__ == "__main__":
    app.run(debug=app.config.get("DEBUG", False))
