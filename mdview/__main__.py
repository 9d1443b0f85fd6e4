from mdview.main import main

raise SystemExit(main())
