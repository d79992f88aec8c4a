from mdworkbench.main import main

raise SystemExit(main())
