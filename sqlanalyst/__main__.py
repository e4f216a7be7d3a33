import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()


def main() -> None:
    uvicorn.run(
        "sqlanalyst.api.main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
    )


if __name__ == "__main__":
    main()
