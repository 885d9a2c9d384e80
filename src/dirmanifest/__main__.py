from dirmanifest.cli import main

raise SystemExit(main())
