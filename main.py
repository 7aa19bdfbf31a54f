# main.py

# Convenience launcher so the application can be started from a source checkout
# with `python main.py gui` or `python main.py cli ...`.
from arithma_tech.main import main

if __name__ == '__main__':
    main()
