from chapnum.cli import main

raise SystemExit(main())
