# To run: python -m provisioner [PROJECT]
from .cli import main

if __name__ == "__main__":
    main()
