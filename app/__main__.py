"""Main DNS configuration backend module.

Copyright (c) 2024 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

from server import main

if __name__ == "__main__":
    main()
