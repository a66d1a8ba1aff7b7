import sys

from euro_mc_pricer.cli import main

if __name__ == "__main__":
    # Defaults: S0=100, K=105, r=5%, sigma=20%, T=1y, 1,000,000 trials
    sys.exit(main())
